from typing import Optional

from fastapi import Depends, Request

from spacetraveling.cms.prismic import get_prismic
from spacetraveling.repos.posts_repo import PrismicPostsRepo
from spacetraveling.services.listing_service import ListingService
from spacetraveling.services.post_service import PostService
from spacetraveling.settings import settings


def get_posts_repo(prismic=Depends(get_prismic)):
    return PrismicPostsRepo(
        prismic,
        document_type=settings.POSTS_DOCUMENT_TYPE,
        page_size=settings.POSTS_PAGE_SIZE,
        navigation_page_size=settings.NAVIGATION_PAGE_SIZE,
    )


def get_listing_service(repo=Depends(get_posts_repo)):
    return ListingService(repo)


def get_post_service(repo=Depends(get_posts_repo)):
    return PostService(repo)


def get_preview_ref(request: Request) -> Optional[str]:
    """Preview content ref supplied by the preview cookie, if any."""
    return request.cookies.get(settings.PREVIEW_COOKIE_NAME) or None
