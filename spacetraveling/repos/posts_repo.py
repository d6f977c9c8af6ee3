import logging
from typing import List, Optional

from spacetraveling.cms.prismic import FIRST_PUBLICATION_DESC, PrismicClient, at

logger = logging.getLogger(__name__)


class PrismicPostsRepo:
    def __init__(
        self,
        client: PrismicClient,
        document_type: str = "posts",
        page_size: int = 1,
        navigation_page_size: int = 100,
    ):
        self.client = client
        self.document_type = document_type
        self.page_size = page_size
        self.navigation_page_size = navigation_page_size

    def first_page(self, ref: Optional[str] = None) -> dict:
        return self.client.query(
            [at("document.type", self.document_type)],
            page_size=self.page_size,
            orderings=FIRST_PUBLICATION_DESC,
            ref=ref,
        )

    def next_page(self, cursor: str) -> dict:
        return self.client.fetch_page(cursor)

    def get_post_doc(self, uid: str, ref: Optional[str] = None) -> dict:
        return self.client.get_by_uid(self.document_type, uid, ref=ref)

    def list_all_docs(self, ref: Optional[str] = None) -> List[dict]:
        """Every post, in the same order the listing pages use."""
        response = self.client.query(
            [at("document.type", self.document_type)],
            page_size=self.navigation_page_size,
            orderings=FIRST_PUBLICATION_DESC,
            ref=ref,
        )
        docs = list(response["results"])
        while response.get("next_page"):
            response = self.client.fetch_page(response["next_page"])
            docs.extend(response["results"])
        logger.debug(f"Fetched {len(docs)} {self.document_type} documents")
        return docs
