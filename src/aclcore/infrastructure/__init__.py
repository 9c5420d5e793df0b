"""Infrastructure adapters for aclcore."""
