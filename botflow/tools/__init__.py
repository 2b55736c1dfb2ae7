"""Command-line tools for botflow."""
