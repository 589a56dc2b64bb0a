"""Lexicast language-learning backend."""
