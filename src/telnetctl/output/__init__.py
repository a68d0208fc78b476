"""Status-line rendering for the CLI."""
