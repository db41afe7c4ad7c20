"""Domain layer — criterion types, criteria, parameters and value parsing.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
