"""Command implementations for the artifactindex CLI."""
