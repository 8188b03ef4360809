"""Shared utilities: structured logging and tracing."""
