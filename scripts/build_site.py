import argparse
import logging
import sys
from pathlib import Path

from spacetraveling.cms.prismic import get_prismic
from spacetraveling.dependencies import get_posts_repo
from spacetraveling.exceptions import ContentSourceError
from spacetraveling.services.listing_service import ListingService
from spacetraveling.services.post_service import PostService
from spacetraveling.services.site_builder import build_site
from spacetraveling.settings import settings

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Render the blog to static HTML.")
    parser.add_argument("--output", default="out", help="Directory to write pages into.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    repo = get_posts_repo(prismic=get_prismic())
    try:
        build_site(Path(args.output), ListingService(repo), PostService(repo))
    except ContentSourceError as e:
        logger.error(f"Build failed: {e}", exc_info=True)
        return 1
    logger.info("Build completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
