"""Command-line interface for skillpm."""
