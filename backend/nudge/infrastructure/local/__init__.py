"""Local (SQLite) implementations."""
