"""Command-line interface for pymppt."""
