"""Application services: cache manager and domain data services."""
