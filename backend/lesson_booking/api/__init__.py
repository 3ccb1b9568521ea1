"""HTTP API support for the lesson booking service."""
