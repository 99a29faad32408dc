"""Engine configuration (schema, defaults, YAML manager)."""
