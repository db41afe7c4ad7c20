"""Service layer — configuration loading, change aggregation, and the engine."""
