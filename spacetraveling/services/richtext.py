import logging
from typing import Callable, Iterable, List, Optional

from markupsafe import Markup, escape

from spacetraveling.schemas.blog import RichTextBlock, RichTextSpan

logger = logging.getLogger(__name__)

BLOCK_TAGS = {
    "paragraph": "p",
    "preformatted": "pre",
    "heading1": "h1",
    "heading2": "h2",
    "heading3": "h3",
    "heading4": "h4",
    "heading5": "h5",
    "heading6": "h6",
    "list-item": "li",
    "o-list-item": "li",
}
LIST_WRAPPERS = {"list-item": "ul", "o-list-item": "ol"}

LinkResolver = Callable[[dict], Optional[str]]


def resolve_link(data: dict) -> Optional[str]:
    """Web and media links keep their URL; document links point at the post page."""
    if data.get("link_type") == "Document":
        uid = data.get("uid")
        return f"/post/{uid}" if uid else None
    return data.get("url")


def as_text(blocks: Iterable[RichTextBlock], separator: str = " ") -> str:
    return separator.join(block.text for block in blocks)


def as_html(
    blocks: Iterable[RichTextBlock], link_resolver: LinkResolver = resolve_link
) -> Markup:
    parts: List[str] = []
    open_list = None
    for block in blocks:
        wrapper = LIST_WRAPPERS.get(block.type)
        if wrapper != open_list:
            if open_list:
                parts.append(f"</{open_list}>")
            if wrapper:
                parts.append(f"<{wrapper}>")
            open_list = wrapper
        parts.append(_render_block(block, link_resolver))
    if open_list:
        parts.append(f"</{open_list}>")
    return Markup("".join(parts))


def _render_block(block: RichTextBlock, link_resolver: LinkResolver) -> str:
    extra = block.model_extra or {}
    if block.type == "image":
        return _render_image(extra, link_resolver)
    if block.type == "embed":
        oembed = extra.get("oembed") or {}
        # oEmbed markup comes from the CMS and is trusted as-is
        return (
            f'<div data-oembed="{escape(oembed.get("embed_url", ""))}" '
            f'data-oembed-type="{escape(oembed.get("type", ""))}">'
            f'{oembed.get("html", "")}</div>'
        )

    tag = BLOCK_TAGS.get(block.type)
    if tag is None:
        logger.debug(f"Unknown rich text block type {block.type!r}, rendering as paragraph")
        tag = "p"
    return f"<{tag}>{_render_spans(block.text, block.spans, link_resolver)}</{tag}>"


def _render_image(extra: dict, link_resolver: LinkResolver) -> str:
    img = f'<img src="{escape(extra.get("url", ""))}" alt="{escape(extra.get("alt") or "")}" />'
    link_to = extra.get("linkTo")
    href = link_resolver(link_to) if link_to else None
    if href:
        img = f'<a href="{escape(href)}">{img}</a>'
    return f'<p class="block-img">{img}</p>'


def _render_spans(
    text: str, spans: List[RichTextSpan], link_resolver: LinkResolver
) -> str:
    if not spans:
        return _escape_text(text)

    ordered = sorted(spans, key=lambda s: (s.start, -s.end))
    bounds = {0, len(text)}
    for span in ordered:
        bounds.add(max(0, min(span.start, len(text))))
        bounds.add(max(0, min(span.end, len(text))))
    edges = sorted(bounds)

    out = []
    for start, end in zip(edges, edges[1:]):
        segment = _escape_text(text[start:end])
        active = [s for s in ordered if s.start <= start and s.end >= end]
        for span in reversed(active):
            segment = _wrap(span, segment, link_resolver)
        out.append(segment)
    return "".join(out)


def _wrap(span: RichTextSpan, inner: str, link_resolver: LinkResolver) -> str:
    if span.type == "strong":
        return f"<strong>{inner}</strong>"
    if span.type == "em":
        return f"<em>{inner}</em>"
    if span.type == "hyperlink":
        data = span.data or {}
        href = link_resolver(data)
        if not href:
            return inner
        target = data.get("target")
        if target:
            return (
                f'<a href="{escape(href)}" target="{escape(target)}" '
                f'rel="noopener noreferrer">{inner}</a>'
            )
        return f'<a href="{escape(href)}">{inner}</a>'
    if span.type == "label":
        label = (span.data or {}).get("label", "")
        return f'<span class="{escape(label)}">{inner}</span>'
    return inner


def _escape_text(text: str) -> str:
    return str(escape(text)).replace("\n", "<br />")
