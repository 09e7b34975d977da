"""SQLite-backed storage for the status table."""
