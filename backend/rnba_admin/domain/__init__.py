"""Domain layer: cache value objects and registration records."""
