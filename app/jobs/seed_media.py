"""
Catalog seeding job. Upserts popular movies and TV shows from the external
catalog into the media table, keyed by external_catalog_id.

Runs out of process from the API, typically on a schedule:
  python -m app.jobs.seed_media --pages 3
  python -m app.jobs.seed_media --type tv

Re-running is safe: existing rows are refreshed, never duplicated.
"""
import argparse
import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from app.config import get_settings
from app.config.logging import configure_logging
from app.core.circuit_breaker import CircuitBreaker
from app.core.exceptions import BridgeError, StoreError
from app.models.interfaces import MediaRepository
from app.models.schemas import MediaType, MediaUpsert
from app.repositories.database import create_engine, create_session_factory, init_db
from app.repositories.sql import SqlMediaRepository
from app.services.catalog import CatalogClient

logger = logging.getLogger(__name__)

MEDIA_TYPES: Sequence[MediaType] = ("movie", "tv")


def to_media_upsert(raw: Dict[str, Any], media_type: MediaType) -> Optional[MediaUpsert]:
    """Map one catalog result to a media row; None if it lacks an id or title."""
    external_id = raw.get("id")
    # Movies carry 'title' / 'release_date', TV shows 'name' / 'first_air_date'
    title = raw.get("title") if media_type == "movie" else raw.get("name")
    if not isinstance(external_id, int) or not title:
        return None
    release_date = raw.get("release_date") if media_type == "movie" else raw.get("first_air_date")
    return MediaUpsert(
        external_catalog_id=external_id,
        type=media_type,
        title=title,
        overview=raw.get("overview") or None,
        poster_path=raw.get("poster_path"),
        release_date=release_date or None,
        popularity=raw.get("popularity"),
    )


async def seed_media_type(
    catalog: CatalogClient,
    media_repo: MediaRepository,
    media_type: MediaType,
    pages: int,
) -> int:
    """Fetch ``pages`` popular pages for one type and upsert them."""
    total = 0
    for page in range(1, pages + 1):
        try:
            results = await catalog.get_popular(media_type, page)
        except BridgeError as exc:
            logger.error(f"Fetching {media_type} page {page} failed: {exc.details}")
            continue

        items: List[MediaUpsert] = [
            item for item in (to_media_upsert(r, media_type) for r in results) if item
        ]
        if not items:
            continue

        try:
            count = await media_repo.upsert_many(items)
        except StoreError as exc:
            logger.error(f"Upserting {media_type} page {page} failed: {exc.message}")
            continue

        logger.info(f"Upserted {count} {media_type} items from page {page}")
        total += count
    return total


async def run(media_types: Sequence[MediaType], pages: int) -> int:
    settings = get_settings()
    if not settings.DATABASE_URL:
        raise SystemExit("DATABASE_URL must be set to run the seeding job")

    engine = create_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    catalog = CatalogClient(
        base_url=settings.CATALOG_BASE_URL,
        api_key=settings.CATALOG_API_KEY,
        circuit_breaker=CircuitBreaker(
            "external_catalog",
            failure_threshold=settings.CIRCUIT_BREAKER_FAILURE_THRESHOLD,
            recovery_timeout_sec=settings.CIRCUIT_BREAKER_RECOVERY_TIMEOUT_SEC,
        ),
        timeout_seconds=settings.CATALOG_TIMEOUT_MS / 1000,
    )
    try:
        await init_db(engine)
        media_repo = SqlMediaRepository(create_session_factory(engine))
        total = 0
        for media_type in media_types:
            total += await seed_media_type(catalog, media_repo, media_type, pages)
        logger.info(f"Seeding complete: {total} items upserted")
        return total
    finally:
        await catalog.aclose()
        await engine.dispose()


def main(argv: Optional[Sequence[str]] = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Seed the media table from the external catalog")
    parser.add_argument("--pages", type=int, default=settings.SEED_PAGES, help="Pages per media type")
    parser.add_argument("--type", choices=MEDIA_TYPES, help="Only seed this media type")
    args = parser.parse_args(argv)
    if args.pages < 1:
        parser.error("--pages must be >= 1")

    configure_logging(debug=settings.DEBUG)
    media_types = [args.type] if args.type else list(MEDIA_TYPES)
    asyncio.run(run(media_types, args.pages))


if __name__ == "__main__":
    main()
