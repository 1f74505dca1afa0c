"""Infrastructure layer: cache storage tiers and the remote backend client."""
