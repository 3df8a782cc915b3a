"""Miscellaneous development helpers (opt-in debug switches)."""
