"""HandRest booking backend."""
