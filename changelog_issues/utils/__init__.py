"""Shared logging and exception utilities."""
