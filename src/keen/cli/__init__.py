"""Command-line interface for keen."""
