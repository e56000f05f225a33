import logging
from typing import List

from locallens.services.proximity import filter_by_proximity
from locallens.services.query_normalizer import FeedCursor, QueryDescriptor, SortOrder
from locallens.services.result_assembler import Page, assemble_businesses, paginate

logger = logging.getLogger(__name__)

# videos read per round trip when there is no center to narrow by
FETCH_BATCH = 200


def discover_businesses(store, query: QueryDescriptor) -> List[dict]:
    """Businesses around the query center (or all of them), with videos and reviews."""
    candidates = store.find_businesses(
        center=query.center,
        radius_miles=query.radius_miles,
        nearest_first=query.order is SortOrder.DISTANCE,
    )
    results = filter_by_proximity(query, candidates)
    page = paginate(results, query)

    logger.debug(
        "Business discovery: %d candidates, %d matched, %d returned",
        len(candidates), page.total, len(page.results),
    )
    return assemble_businesses(page.results, store)


def discover_videos(store, query: QueryDescriptor, batch_size: int = FETCH_BATCH) -> Page:
    """Videos whose owning business matches the query, one page of them."""
    if query.center is not None:
        nearby = store.find_businesses(center=query.center, radius_miles=query.radius_miles)
        businesses = {b.id: b for b in nearby}
        videos = store.find_videos(business_ids=list(businesses)) if businesses else []
        results = filter_by_proximity(query, videos, locate=lambda v: businesses.get(v.business_id))
        fetched = len(videos)
    else:
        results, fetched = _walk_recent_videos(store, query, batch_size)

    page = paginate(results, query)

    logger.debug(
        "Video discovery: %d candidates, %d matched, %d returned",
        fetched, page.total, len(page.results),
    )
    return page


def _walk_recent_videos(store, query: QueryDescriptor, batch_size: int):
    # newest first from the cursor on, until one match past the page or the end
    wanted = query.limit + 1
    after = query.cursor
    results = []
    fetched = 0
    while True:
        batch = store.find_videos(after=after, limit=batch_size)
        fetched += len(batch)
        businesses = store.find_businesses_by_ids({v.business_id for v in batch})
        results.extend(filter_by_proximity(query, batch, locate=lambda v: businesses.get(v.business_id)))
        if len(results) >= wanted or len(batch) < batch_size:
            return results, fetched
        last = batch[-1]
        after = FeedCursor(created_at=last.created_at, id=last.id)
