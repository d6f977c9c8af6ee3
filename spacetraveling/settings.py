from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Prismic
    PRISMIC_API_ENDPOINT: str = "https://spacetraveling.cdn.prismic.io/api/v2"
    PRISMIC_ACCESS_TOKEN: str = ""
    PRISMIC_TIMEOUT_SECONDS: float = 10.0

    # Posts
    POSTS_DOCUMENT_TYPE: str = "posts"
    POSTS_PAGE_SIZE: int = 1
    NAVIGATION_PAGE_SIZE: int = 100  # largest page Prismic serves

    # Revalidation
    LISTING_REVALIDATE_SECONDS: int = 60 * 60 * 24
    POST_REVALIDATE_SECONDS: int = 60 * 30
    PAGE_CACHE_MAX_ENTRIES: int = 512

    # Preview
    PREVIEW_COOKIE_NAME: str = "io.prismic.preview"
    PREVIEW_EXIT_URL: str = "/api/exit-preview"

    # Comments (utterances)
    COMMENTS_SCRIPT_URL: str = "https://utteranc.es/client.js"
    COMMENTS_REPO: str = ""
    COMMENTS_ISSUE_TERM: str = "pathname"
    COMMENTS_THEME: str = "photon-dark"

    # Site
    SITE_NAME: str = "spacetraveling"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def documents_search_url(self) -> str:
        return f"{self.PRISMIC_API_ENDPOINT.rstrip('/')}/documents/search"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
