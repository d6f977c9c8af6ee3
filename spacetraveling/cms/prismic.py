"""Thin client for the Prismic REST API v2."""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from spacetraveling.exceptions import (
    InvalidCursor,
    MalformedResponse,
    NotFound,
    SourceUnavailable,
)
from spacetraveling.settings import settings

logger = logging.getLogger(__name__)

FIRST_PUBLICATION_DESC = "[document.first_publication_date desc]"


def at(path: str, value: str) -> str:
    """Build an ``at`` predicate, e.g. ``[at(document.type, "posts")]``."""
    return f'[at({path}, "{value}")]'


def build_query(predicates: Sequence[str]) -> str:
    return f"[{''.join(predicates)}]"


class PrismicClient:
    def __init__(
        self,
        endpoint: str,
        access_token: str = "",
        timeout: float = 10.0,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self._master_ref: Optional[str] = None

    @property
    def search_url(self) -> str:
        return f"{self.endpoint}/documents/search"

    def master_ref(self) -> str:
        """Ref of the currently published content, fetched once per client."""
        if self._master_ref is None:
            api = self._get(self.endpoint, self._auth_params())
            refs = api.get("refs") or []
            master = next((r for r in refs if r.get("isMasterRef")), None)
            if not master or not master.get("ref"):
                raise MalformedResponse("Prismic API did not report a master ref")
            self._master_ref = master["ref"]
            logger.debug(f"Using Prismic master ref {self._master_ref}")
        return self._master_ref

    def query(
        self,
        predicates: Sequence[str],
        *,
        page_size: int = 20,
        page: int = 1,
        orderings: Optional[str] = None,
        ref: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = {
            **self._auth_params(),
            "ref": ref or self.master_ref(),
            "q": build_query(predicates),
            "pageSize": page_size,
            "page": page,
        }
        if orderings:
            params["orderings"] = orderings
        return self._search(self.search_url, params)

    def get_by_uid(
        self, document_type: str, uid: str, *, ref: Optional[str] = None
    ) -> Dict[str, Any]:
        response = self.query(
            [at(f"my.{document_type}.uid", uid)], page_size=1, ref=ref
        )
        results: List[dict] = response["results"]
        if not results:
            raise NotFound(uid)
        return results[0]

    def fetch_page(self, url: str) -> Dict[str, Any]:
        """Fetch a ``next_page`` URL previously returned by the search API."""
        if not url.startswith(self.search_url):
            raise InvalidCursor(f"Refusing to follow cursor outside {self.search_url}")
        return self._search(url, None)

    def _auth_params(self) -> Dict[str, str]:
        return {"access_token": self.access_token} if self.access_token else {}

    def _search(self, url: str, params: Optional[dict]) -> Dict[str, Any]:
        payload = self._get(url, params)
        if not isinstance(payload.get("results"), list):
            raise MalformedResponse("Prismic search response has no results list")
        return payload

    def _get(self, url: str, params: Optional[dict]) -> Dict[str, Any]:
        logger.debug(f"GET {url}")
        try:
            response = httpx.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            raise SourceUnavailable(
                f"Prismic request timed out after {self.timeout}s"
            ) from e
        except httpx.HTTPStatusError as e:
            raise SourceUnavailable(
                f"Prismic request failed: {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise SourceUnavailable(f"Prismic request failed: {e}") from e
        except json.JSONDecodeError as e:
            raise MalformedResponse(f"Prismic returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise MalformedResponse("Prismic returned a non-object payload")
        return payload


def get_prismic() -> PrismicClient:
    """
    Build a Prismic client from settings.
    Called at runtime to avoid import-time connections.
    """
    return PrismicClient(
        settings.PRISMIC_API_ENDPOINT,
        access_token=settings.PRISMIC_ACCESS_TOKEN,
        timeout=settings.PRISMIC_TIMEOUT_SECONDS,
    )
