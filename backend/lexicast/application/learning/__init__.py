"""
Learning bounded context - Application layer.

Contains use cases for flashcard group and flashcard management, scoped by
the caller's owner key so anonymous and registered users share one path.
"""
