import logging
import threading
from typing import List, Optional, Set

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import HTMLResponse

from spacetraveling import dependencies as deps
from spacetraveling.exceptions import ContentSourceError, NotFound
from spacetraveling.schemas.listing import ListingState
from spacetraveling.services.listing_service import ListingService
from spacetraveling.services.page_cache import MISSING, PageCache
from spacetraveling.services.post_service import PostService
from spacetraveling.settings import settings
from spacetraveling.templating import (
    render_error,
    render_fallback,
    render_home,
    render_not_found,
    render_post,
)

logger = logging.getLogger(__name__)

router = APIRouter()
page_cache = PageCache(max_entries=settings.PAGE_CACHE_MAX_ENTRIES)
_generating: Set[str] = set()
_generating_lock = threading.Lock()  # sync routes run in a threadpool

LISTING_KEY = "listing"
STATIC_PATHS_KEY = "static-paths"


def _post_key(uid: str) -> str:
    return f"post:{uid}"


@router.get("/", response_class=HTMLResponse)
def home(
    service: ListingService = Depends(deps.get_listing_service),
    ref: Optional[str] = Depends(deps.get_preview_ref),
):
    try:
        state = _listing_state(service, ref)
    except ContentSourceError as e:
        logger.error(f"Failed to render listing: {e}")
        return HTMLResponse(render_error("Não foi possível carregar os posts."), status_code=502)
    return HTMLResponse(render_home(state, preview=ref is not None))


@router.get("/post/{uid}", response_class=HTMLResponse)
def post_page(
    uid: str,
    background_tasks: BackgroundTasks,
    post_service: PostService = Depends(deps.get_post_service),
    listing_service: ListingService = Depends(deps.get_listing_service),
    ref: Optional[str] = Depends(deps.get_preview_ref),
):
    if ref is None:
        cached = page_cache.get(_post_key(uid))
        if cached is MISSING:
            return HTMLResponse(render_not_found(uid), status_code=404)
        if cached is not None:
            return HTMLResponse(render_post(cached))

    try:
        prebuilt = ref is not None or uid in _static_paths(listing_service)
    except ContentSourceError as e:
        logger.error(f"Failed to resolve static paths: {e}")
        return HTMLResponse(render_error("Não foi possível carregar o post."), status_code=502)

    if not prebuilt:
        if _claim_generation(uid):
            logger.info(f"Post {uid} was not pre-generated, serving fallback")
            background_tasks.add_task(generate_post_page, post_service, uid)
        return HTMLResponse(render_fallback(uid))

    try:
        page = post_service.build_page(uid, ref=ref)
    except NotFound:
        if ref is None:
            page_cache.set(_post_key(uid), MISSING, settings.POST_REVALIDATE_SECONDS)
        return HTMLResponse(render_not_found(uid), status_code=404)
    except ContentSourceError as e:
        logger.error(f"Failed to render post {uid}: {e}")
        return HTMLResponse(render_error("Não foi possível carregar o post."), status_code=502)

    if ref is None:
        page_cache.set(_post_key(uid), page, settings.POST_REVALIDATE_SECONDS)
    return HTMLResponse(render_post(page))


def generate_post_page(service: PostService, uid: str) -> None:
    """Build a post page in the background and cache the result."""
    try:
        page = service.build_page(uid)
    except NotFound:
        logger.info(f"Post {uid} does not exist")
        page_cache.set(_post_key(uid), MISSING, settings.POST_REVALIDATE_SECONDS)
        return
    except ContentSourceError as e:
        logger.error(f"Background generation of post {uid} failed: {e}")
    else:
        page_cache.set(_post_key(uid), page, settings.POST_REVALIDATE_SECONDS)
        logger.info(f"Generated post {uid}")
    finally:
        with _generating_lock:
            _generating.discard(uid)


def _claim_generation(uid: str) -> bool:
    """Mark uid as being generated; False when another request already did."""
    with _generating_lock:
        if uid in _generating:
            return False
        _generating.add(uid)
        return True


def _listing_state(service: ListingService, ref: Optional[str]) -> ListingState:
    if ref is not None:
        return ListingState.from_pagination(service.load_initial(ref=ref))

    state = page_cache.get(LISTING_KEY)
    if state is None:
        state = ListingState.from_pagination(service.load_initial())
        page_cache.set(LISTING_KEY, state, settings.LISTING_REVALIDATE_SECONDS)
    return state


def _static_paths(service: ListingService) -> List[str]:
    paths = page_cache.get(STATIC_PATHS_KEY)
    if paths is None:
        paths = service.static_paths()
        page_cache.set(STATIC_PATHS_KEY, paths, settings.LISTING_REVALIDATE_SECONDS)
    return paths
