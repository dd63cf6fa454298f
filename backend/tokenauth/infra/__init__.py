"""Infrastructure adapters implementing the service ports."""
