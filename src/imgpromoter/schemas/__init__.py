"""Packaged JSON schemas and validation."""
