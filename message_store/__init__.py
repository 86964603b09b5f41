"""Persistence and retrieval of chat messages: lifecycle, tags and tag search."""
