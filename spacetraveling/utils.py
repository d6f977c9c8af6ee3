import math
from typing import Iterable

from spacetraveling.schemas.blog import ContentBlock
from spacetraveling.services.richtext import as_text

AVERAGE_WORDS_PER_MINUTE = 200


def count_words(text: str) -> int:
    return len(text.split())


def estimate_reading_time(content: Iterable[ContentBlock]) -> int:
    words = sum(
        count_words(block.heading) + count_words(as_text(block.body))
        for block in content
    )
    return math.ceil(words / AVERAGE_WORDS_PER_MINUTE)
