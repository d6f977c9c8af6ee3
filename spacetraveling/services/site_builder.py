import logging
from pathlib import Path
from typing import List

from spacetraveling.schemas.listing import ListingState
from spacetraveling.services.listing_service import ListingService
from spacetraveling.services.post_service import PostService
from spacetraveling.templating import render_home, render_post

logger = logging.getLogger(__name__)


def build_site(
    output_dir: Path,
    listing_service: ListingService,
    post_service: PostService,
) -> List[Path]:
    """
    Render the listing and every pre-generated post page into ``output_dir``.
    Content source errors propagate and abort the build.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []

    pagination = listing_service.load_initial()
    index = output_dir / "index.html"
    index.write_text(render_home(ListingState.from_pagination(pagination)), encoding="utf-8")
    written.append(index)

    for uid in [post.uid for post in pagination.results]:
        page = post_service.build_page(uid)
        target = output_dir / "post" / uid / "index.html"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_post(page), encoding="utf-8")
        written.append(target)
        logger.info(f"Rendered post {uid}")

    logger.info(f"Built {len(written)} pages into {output_dir}")
    return written
