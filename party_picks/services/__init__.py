"""Service layer: every operation the HTTP API and the CLI expose."""
