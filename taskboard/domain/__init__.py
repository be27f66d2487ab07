"""Domain layer: entities and pure scheduling rules."""
