"""Domain models, errors and the batch controller."""
