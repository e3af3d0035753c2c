"""Observability – logging and tracing ports."""
