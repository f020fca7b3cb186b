"""Domain entities for CineVault.

Entities are plain Python dataclasses and enums that carry catalog data
between layers. They have no dependencies on infrastructure or frameworks.
"""

from cinevault.domain.entities.movie import MediaLink, MediaType, MovieData, MovieMetadata

__all__ = [
    "MediaLink",
    "MediaType",
    "MovieData",
    "MovieMetadata",
]
