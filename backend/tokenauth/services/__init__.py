"""Service layer: token components and the use cases built on them."""
