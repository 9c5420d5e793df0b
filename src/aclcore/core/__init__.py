"""Core infrastructure: configuration, logging, exceptions and events."""
