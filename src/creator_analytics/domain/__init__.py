"""Domain layer: value objects, contracts and errors."""
