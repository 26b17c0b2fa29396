"""Top-level workflows orchestrating the services."""
