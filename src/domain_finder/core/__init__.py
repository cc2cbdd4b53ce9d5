"""Core domain layer: entities, lifecycle rules and the batch controller."""
