"""Core engine: dependency resolution, lock files, and install planning."""
