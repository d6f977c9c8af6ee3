from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from spacetraveling.services.dates import format_date


class PostSummaryData(BaseModel):
    title: str = ""
    subtitle: str = ""
    author: str = ""

    @field_validator("title", "subtitle", "author", mode="before")
    @classmethod
    def _none_text(cls, value):
        return value or ""


class PostSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    uid: str
    first_publication_date: Optional[str] = None
    data: PostSummaryData = Field(default_factory=PostSummaryData)

    @computed_field
    @property
    def published_on(self) -> str:
        return format_date(self.first_publication_date)


class PostsPagination(BaseModel):
    results: List[PostSummary] = Field(default_factory=list)
    next_page: Optional[str] = None


class RichTextSpan(BaseModel):
    start: int
    end: int
    type: str
    data: Optional[Dict[str, Any]] = None


class RichTextBlock(BaseModel):
    model_config = ConfigDict(extra="allow")  # url, alt, oembed, dimensions...

    type: str = "paragraph"
    text: str = ""
    spans: List[RichTextSpan] = Field(default_factory=list)


class ContentBlock(BaseModel):
    heading: str = ""
    body: List[RichTextBlock] = Field(default_factory=list)

    @field_validator("heading", mode="before")
    @classmethod
    def _none_heading(cls, value):
        return value or ""


class Banner(BaseModel):
    url: Optional[str] = None
    alt: Optional[str] = None


class PostData(BaseModel):
    title: str = ""
    banner: Banner = Field(default_factory=Banner)
    author: str = ""
    content: List[ContentBlock] = Field(default_factory=list)

    @field_validator("title", "author", mode="before")
    @classmethod
    def _none_text(cls, value):
        return value or ""

    @field_validator("banner", mode="before")
    @classmethod
    def _empty_banner(cls, value):
        return value or {}

    @field_validator("content", mode="before")
    @classmethod
    def _empty_content(cls, value):
        return value or []


class Post(BaseModel):
    uid: str
    first_publication_date: Optional[str] = None
    last_publication_date: Optional[str] = None
    data: PostData = Field(default_factory=PostData)


class PostNavigation(BaseModel):
    previous: Optional[Post] = None
    next: Optional[Post] = None


class PostPage(BaseModel):
    post: Post
    reading_time: int
    edited_at: Optional[str] = None
    navigation: PostNavigation = Field(default_factory=PostNavigation)
    preview: bool = False
