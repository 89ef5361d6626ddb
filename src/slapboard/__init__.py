"""Slapboard: anonymous voting on public figures with moderated actions."""

__version__ = "0.1.0"
