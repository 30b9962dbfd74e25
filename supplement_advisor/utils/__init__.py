"""Shared helpers (module loggers, log-safe profile descriptions)."""
