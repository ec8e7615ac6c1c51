"""Domain layer: entities, errors and content visibility rules."""
