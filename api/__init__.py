"""HTTP API for the Social Rankings Service."""
