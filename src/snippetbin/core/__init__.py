"""Core configuration, roles, errors and security helpers."""
