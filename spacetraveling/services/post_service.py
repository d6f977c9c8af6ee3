import logging
from typing import List, Optional

from pydantic import ValidationError

from spacetraveling.schemas.blog import Post, PostNavigation, PostPage
from spacetraveling.services.dates import format_updated_at
from spacetraveling.utils import estimate_reading_time

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, repo):
        self.repo = repo

    def load_post(self, uid: str, ref: Optional[str] = None) -> Post:
        doc = self.repo.get_post_doc(uid, ref=ref)
        return parse_post(doc, uid)

    def compute_navigation(self, uid: str, ref: Optional[str] = None) -> PostNavigation:
        posts = [parse_post(doc) for doc in self.repo.list_all_docs(ref=ref)]
        return find_neighbours(posts, uid)

    def build_page(self, uid: str, ref: Optional[str] = None) -> PostPage:
        post = self.load_post(uid, ref=ref)
        navigation = self.compute_navigation(uid, ref=ref)
        return PostPage(
            post=post,
            reading_time=estimate_reading_time(post.data.content),
            edited_at=format_updated_at(post.last_publication_date),
            navigation=navigation,
            preview=ref is not None,
        )


def find_neighbours(posts: List[Post], uid: str) -> PostNavigation:
    index = next((i for i, post in enumerate(posts) if post.uid == uid), None)
    if index is None:
        logger.warning(f"Post {uid} is missing from the full listing, no navigation")
        return PostNavigation()
    return PostNavigation(
        previous=posts[index - 1] if index > 0 else None,
        next=posts[index + 1] if index + 1 < len(posts) else None,
    )


def parse_post(doc: dict, uid: Optional[str] = None) -> Post:
    """Coerce a raw document; content that fails validation degrades to an empty post body."""
    base = {
        "uid": doc.get("uid") or uid or "",
        "first_publication_date": doc.get("first_publication_date"),
        "last_publication_date": doc.get("last_publication_date"),
    }
    try:
        return Post(**base, data=doc.get("data") or {})
    except ValidationError as e:
        logger.warning(f"Malformed content for post {base['uid']}: {e}")

    data = doc.get("data") if isinstance(doc.get("data"), dict) else {}
    fallback = {
        key: data[key]
        for key in ("title", "author")
        if isinstance(data.get(key), str)
    }
    return Post(**base, data=fallback)
