"""Monitoring: Prometheus cache metrics."""
