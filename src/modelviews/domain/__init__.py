"""Domain layer — policies, the Patch value, schemas and derivation.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
