"""Command-line interface for the shelf."""
