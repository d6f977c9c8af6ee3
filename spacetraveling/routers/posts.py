import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from spacetraveling import dependencies as deps
from spacetraveling.exceptions import (
    ContentSourceError,
    InvalidCursor,
    LoadInProgressError,
    NotFound,
)
from spacetraveling.schemas.blog import PostPage, PostsPagination
from spacetraveling.schemas.listing import ListingState
from spacetraveling.services.listing_service import ListingService
from spacetraveling.services.post_service import PostService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/posts", response_model=PostsPagination)
def list_posts(
    service: ListingService = Depends(deps.get_listing_service),
    ref: Optional[str] = Depends(deps.get_preview_ref),
):
    """First page of posts and the cursor to the next one."""
    try:
        return service.load_initial(ref=ref)
    except ContentSourceError as e:
        logger.error(f"Failed to load posts: {e}")
        raise HTTPException(status_code=502, detail="Failed to retrieve posts")


@router.post("/posts/more", response_model=ListingState)
def load_more_posts(
    state: ListingState,
    service: ListingService = Depends(deps.get_listing_service),
):
    """Append the next page to the caller's listing state."""
    try:
        new_state = service.load_more_state(state)
    except LoadInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidCursor as e:
        raise HTTPException(status_code=400, detail=str(e))

    if new_state.error:
        return JSONResponse(status_code=502, content=new_state.model_dump(mode="json"))
    return new_state


@router.get("/posts/{uid}", response_model=PostPage)
def get_post(
    uid: str,
    service: PostService = Depends(deps.get_post_service),
    ref: Optional[str] = Depends(deps.get_preview_ref),
):
    """A single post with reading time and previous/next navigation."""
    try:
        return service.build_page(uid, ref=ref)
    except NotFound:
        raise HTTPException(status_code=404, detail="Post not found")
    except ContentSourceError as e:
        logger.error(f"Failed to load post {uid}: {e}")
        raise HTTPException(status_code=502, detail="Failed to retrieve post")
