"""Command handlers for the reposeed CLI."""
