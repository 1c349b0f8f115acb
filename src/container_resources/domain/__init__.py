"""Domain layer: resource entities, reference value objects and pure services."""
