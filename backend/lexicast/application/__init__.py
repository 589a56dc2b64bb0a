"""
Application layer.

Use cases orchestrate domain objects against protocols (ports) that the
infrastructure layer implements. Nothing in here imports SQLAlchemy,
FastAPI, Redis or subprocess code directly.
"""
