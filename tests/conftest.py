from spacetraveling.exceptions import NotFound, SourceUnavailable

SEARCH_URL = "https://spacetraveling.cdn.prismic.io/api/v2/documents/search"


def make_post_doc(
    uid: str,
    *,
    title: str | None = None,
    subtitle: str = "Pensando em sincronização em vez de ciclos de vida",
    author: str = "Joseph Oliveira",
    first_publication_date: str | None = "2021-03-15T19:25:28+0000",
    last_publication_date: str | None = None,
    content: list | None = None,
) -> dict:
    """Raw Prismic document shaped like the search API returns it."""
    return {
        "id": f"id-{uid}",
        "uid": uid,
        "type": "posts",
        "first_publication_date": first_publication_date,
        "last_publication_date": last_publication_date,
        "data": {
            "title": title or uid.replace("-", " ").title(),
            "subtitle": subtitle,
            "author": author,
            "banner": {"url": f"https://images.prismic.io/{uid}.png"},
            "content": content if content is not None else [],
        },
    }


def paginate(docs: list, page_size: int) -> dict:
    """Split docs into search responses keyed by the cursor that fetches them (first page under None)."""
    pages = {}
    chunks = [docs[i : i + page_size] for i in range(0, len(docs), page_size)] or [[]]
    for number, chunk in enumerate(chunks, start=1):
        key = None if number == 1 else f"{SEARCH_URL}?page={number}"
        has_next = number < len(chunks)
        pages[key] = {
            "page": number,
            "results": chunk,
            "next_page": f"{SEARCH_URL}?page={number + 1}" if has_next else None,
        }
    return pages


class FakeRepo:
    """
    Minimal posts repo stand-in.
    Cursors listed in failing_cursors raise SourceUnavailable.
    """

    def __init__(self, docs=None, page_size: int = 1, failing_cursors=()):
        self.docs = list(docs or [])
        self.pages = paginate(self.docs, page_size)
        self.failing_cursors = set(failing_cursors)
        self.calls = []

    def first_page(self, ref=None):
        self.calls.append(("first_page", ref))
        return self.pages[None]

    def next_page(self, cursor):
        self.calls.append(("next_page", cursor))
        if cursor in self.failing_cursors:
            raise SourceUnavailable("Prismic request failed: 503")
        return self.pages[cursor]

    def get_post_doc(self, uid, ref=None):
        self.calls.append(("get_post_doc", uid, ref))
        for doc in self.docs:
            if doc["uid"] == uid:
                return doc
        raise NotFound(uid)

    def list_all_docs(self, ref=None):
        self.calls.append(("list_all_docs", ref))
        return list(self.docs)


class FakeListingService:
    """
    Minimal listing service stand-in for router tests.
    """

    def __init__(self, pagination=None, more_state=None, error=None):
        self.pagination = pagination
        self.more_state = more_state
        self.error = error
        self.calls = []

    def load_initial(self, ref=None):
        self.calls.append(("load_initial", ref))
        if self.error:
            raise self.error
        return self.pagination

    def load_more_state(self, state):
        self.calls.append(("load_more_state", state))
        if self.error:
            raise self.error
        return self.more_state

    def static_paths(self, ref=None):
        self.calls.append(("static_paths", ref))
        if self.error:
            raise self.error
        return [post.uid for post in self.pagination.results]


class FakePostService:
    """
    Minimal post service stand-in for router tests.
    """

    def __init__(self, pages=None, error=None):
        self.pages = pages or {}
        self.error = error
        self.calls = []

    def build_page(self, uid, ref=None):
        self.calls.append((uid, ref))
        if self.error:
            raise self.error
        if uid not in self.pages:
            raise NotFound(uid)
        return self.pages[uid]
