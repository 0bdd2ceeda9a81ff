"""Infrastructure adapters for the message inbox."""
