"""Service layer: providers, validation and the provider cache."""
