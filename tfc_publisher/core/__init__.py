"""Shared infrastructure: settings, logging and the error taxonomy."""
