"""CLI command modules for craftvm."""
