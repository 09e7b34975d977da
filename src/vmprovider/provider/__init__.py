"""Provider entry point, table delegates and their helper."""
