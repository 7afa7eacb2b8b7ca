"""Shared infrastructure: errors, logging and settings."""
