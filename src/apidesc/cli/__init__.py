"""Command-line interface for apidesc."""
