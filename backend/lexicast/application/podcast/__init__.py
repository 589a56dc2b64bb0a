"""Podcast application layer."""
