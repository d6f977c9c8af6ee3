"""Jinja2 environment and page renderers."""

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from spacetraveling.schemas.blog import PostPage
from spacetraveling.schemas.listing import ListingState
from spacetraveling.services.comments import CommentsConfig, embed_attributes
from spacetraveling.services.dates import format_date
from spacetraveling.services.richtext import as_html
from spacetraveling.settings import settings

TEMPLATE_DIR = Path(__file__).parent / "templates"

_ENV: Environment | None = None


def get_environment() -> Environment:
    """Return a cached Jinja environment configured for package templates."""
    global _ENV
    if _ENV is None:
        _ENV = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        _ENV.filters["format_date"] = format_date
        _ENV.filters["richtext"] = as_html
        _ENV.globals["site_name"] = settings.SITE_NAME
    return _ENV


def render_home(state: ListingState, *, preview: bool = False) -> str:
    template = get_environment().get_template("home.html")
    return template.render(
        state=state,
        state_json=state.model_dump(mode="json"),
        preview=preview,
        exit_preview_url=settings.PREVIEW_EXIT_URL,
    )


def render_post(page: PostPage, comments: Optional[CommentsConfig] = None) -> str:
    comments = comments or CommentsConfig.from_settings()
    template = get_environment().get_template("post.html")
    return template.render(
        page=page,
        post=page.post,
        comments=embed_attributes(comments),
        exit_preview_url=settings.PREVIEW_EXIT_URL,
    )


def render_fallback(uid: str, refresh_seconds: int = 2) -> str:
    template = get_environment().get_template("fallback.html")
    return template.render(uid=uid, refresh_seconds=refresh_seconds)


def render_not_found(uid: str) -> str:
    return get_environment().get_template("not_found.html").render(uid=uid)


def render_error(message: str) -> str:
    return get_environment().get_template("error.html").render(message=message)
