import datetime
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# date-fns ptBR "MMM"
MONTH_ABBREVIATIONS = (
    "jan",
    "fev",
    "mar",
    "abr",
    "mai",
    "jun",
    "jul",
    "ago",
    "set",
    "out",
    "nov",
    "dez",
)


def parse_timestamp(value: Optional[str]) -> Optional[datetime.datetime]:
    """Parse a Prismic timestamp (``2021-03-25T19:25:28+0000``) or ISO 8601 string."""
    if not value:
        return None
    try:
        return datetime.datetime.strptime(value, "%Y-%m-%dT%H:%M:%S%z")
    except ValueError:
        pass
    try:
        return datetime.datetime.fromisoformat(value)
    except ValueError:
        logger.warning(f"Unparseable timestamp: {value!r}")
        return None


def format_date(value: Optional[str]) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return ""
    month = MONTH_ABBREVIATIONS[parsed.month - 1]
    return f"{parsed.day} {month} {parsed.year}"


def format_date_time(value: Optional[str]) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return ""
    return parsed.strftime("%d/%m/%Y %H:%M")


def format_updated_at(value: Optional[str]) -> Optional[str]:
    """Label shown under a post that was edited; None means the label is omitted."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return f"* editado em {format_date(value)}, às {parsed.strftime('%H:%M')}"
