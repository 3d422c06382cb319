"""Meme coin building blocks: domain model, MySQL persistence, services and Flask request hooks."""

__version__ = "0.1.0"