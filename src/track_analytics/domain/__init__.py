"""Domain layer: track entities, predicates and the dataset store."""
