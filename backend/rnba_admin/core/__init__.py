"""Core application plumbing: settings, logging and the service context."""
