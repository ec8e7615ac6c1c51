"""Application use cases orchestrating domain rules and infrastructure."""
