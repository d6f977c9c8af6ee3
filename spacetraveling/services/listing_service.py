import logging
from typing import Iterable, List, Optional

from pydantic import ValidationError

from spacetraveling.exceptions import ContentSourceError, InvalidCursor
from spacetraveling.schemas.blog import PostsPagination, PostSummary
from spacetraveling.schemas.listing import ListingState

logger = logging.getLogger(__name__)


class ListingService:
    def __init__(self, repo):
        self.repo = repo

    def load_initial(self, ref: Optional[str] = None) -> PostsPagination:
        response = self.repo.first_page(ref=ref)
        return _to_pagination(response)

    def load_more(self, cursor: str) -> PostsPagination:
        response = self.repo.next_page(cursor)
        return _to_pagination(response)

    def load_more_state(self, state: ListingState) -> ListingState:
        """
        Append the page behind ``state.next_page``.
        On failure the posts and cursor are kept and the error is reported on
        the returned state so the caller can surface it and retry.
        """
        if not state.has_more:
            return state
        busy = state.begin_loading()
        try:
            page = self.load_more(busy.next_page)
        except InvalidCursor:
            raise
        except ContentSourceError as e:
            logger.warning(f"Failed to load more posts from {busy.next_page}: {e}")
            return busy.load_failed(f"Error fetching more posts: {e}")
        return busy.page_loaded(page)

    def static_paths(self, ref: Optional[str] = None) -> List[str]:
        """Uids pre-generated at build time (the first listing page)."""
        return [post.uid for post in self.load_initial(ref=ref).results]


def parse_results(raw_docs: Iterable[dict]) -> List[PostSummary]:
    posts = []
    for doc in raw_docs:
        try:
            posts.append(
                PostSummary(
                    uid=doc["uid"],
                    first_publication_date=doc.get("first_publication_date"),
                    data=doc.get("data") or {},
                )
            )
        except (KeyError, TypeError, ValidationError) as e:
            logger.warning(f"Skipping malformed post document {doc!r:.80}: {e}")
    return posts


def _to_pagination(response: dict) -> PostsPagination:
    return PostsPagination(
        results=parse_results(response.get("results", [])),
        next_page=response.get("next_page"),
    )
