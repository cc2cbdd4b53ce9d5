"""Application services wiring configuration, adapters and the controller."""
