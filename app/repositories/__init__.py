"""Repository implementations package."""
from .memory import (
    InMemoryDatabase,
    InMemoryFavoriteRepository,
    InMemoryMediaRepository,
    InMemoryProfileRepository,
    InMemoryReviewRepository,
    InMemoryTrendingRepository,
)
from .sql import (
    SqlFavoriteRepository,
    SqlMediaRepository,
    SqlProfileRepository,
    SqlReviewRepository,
    SqlTrendingRepository,
)

__all__ = [
    "InMemoryDatabase",
    "InMemoryFavoriteRepository",
    "InMemoryMediaRepository",
    "InMemoryProfileRepository",
    "InMemoryReviewRepository",
    "InMemoryTrendingRepository",
    "SqlFavoriteRepository",
    "SqlMediaRepository",
    "SqlProfileRepository",
    "SqlReviewRepository",
    "SqlTrendingRepository",
]
