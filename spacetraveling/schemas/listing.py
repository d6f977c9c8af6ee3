from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from spacetraveling.exceptions import LoadInProgressError
from spacetraveling.schemas.blog import PostsPagination, PostSummary


class ListingState(BaseModel):
    """
    View state of the post listing. Every transition returns a new state;
    instances are never mutated.
    """

    model_config = ConfigDict(frozen=True)

    posts: List[PostSummary] = Field(default_factory=list)
    next_page: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None

    @classmethod
    def from_pagination(cls, pagination: PostsPagination) -> "ListingState":
        return cls(posts=pagination.results, next_page=pagination.next_page)

    @property
    def has_more(self) -> bool:
        return bool(self.next_page)

    def begin_loading(self) -> "ListingState":
        if self.loading:
            raise LoadInProgressError("Posts are already being loaded")
        return self.model_copy(update={"loading": True, "error": None})

    def page_loaded(self, page: PostsPagination) -> "ListingState":
        seen = {post.uid for post in self.posts}
        appended = []
        for post in page.results:
            if post.uid not in seen:
                seen.add(post.uid)
                appended.append(post)
        return self.model_copy(
            update={
                "posts": [*self.posts, *appended],
                "next_page": page.next_page,
                "loading": False,
                "error": None,
            }
        )

    def load_failed(self, message: str) -> "ListingState":
        return self.model_copy(update={"loading": False, "error": message})
