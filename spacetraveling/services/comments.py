from typing import Dict, Optional

from pydantic import BaseModel

from spacetraveling.settings import Settings, settings


class CommentsConfig(BaseModel):
    script_url: str
    repo: str = ""
    issue_term: str = "pathname"
    theme: str = "photon-dark"
    crossorigin: str = "anonymous"

    @classmethod
    def from_settings(cls, current: Optional[Settings] = None) -> "CommentsConfig":
        current = current or settings
        return cls(
            script_url=current.COMMENTS_SCRIPT_URL,
            repo=current.COMMENTS_REPO,
            issue_term=current.COMMENTS_ISSUE_TERM,
            theme=current.COMMENTS_THEME,
        )


def embed_attributes(config: CommentsConfig) -> Optional[Dict[str, str]]:
    """Attributes of the comments <script> tag, or None when comments are disabled."""
    if not config.repo:
        return None
    return {
        "src": config.script_url,
        "repo": config.repo,
        "issue-term": config.issue_term,
        "theme": config.theme,
        "crossorigin": config.crossorigin,
    }
