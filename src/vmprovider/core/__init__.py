"""Value types, configuration and logging shared across the provider."""
