"""Shared infrastructure: errors, settings, logging, HTTP and file helpers."""
