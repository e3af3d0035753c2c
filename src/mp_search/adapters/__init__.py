"""Adapters – optional integrations behind the library's ports."""
