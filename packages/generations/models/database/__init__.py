"""Database models for generations."""

from packages.generations.models.database.generation import GenerationEntity

__all__ = [
    "GenerationEntity",
]
