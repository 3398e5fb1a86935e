"""Shared helpers used across mangashelf modules."""
