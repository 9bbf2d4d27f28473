"""
Parsing of the model reply.

The reply is free text with two sentinels: a ``--- PROMPTS ---`` line that
separates the lesson from the image prompts, and a ``PROMPT:`` prefix on
each prompt line.
"""

import re
from typing import List, NamedTuple

from errors import SeparatorNotFoundError
from schemas import GroundingSource

PROMPTS_SEPARATOR = "--- PROMPTS ---"

_PROMPT_PREFIX = re.compile(r"^PROMPT:\s*")


class SplitResponse(NamedTuple):
    lesson: str
    prompts_block: str


def split_response(raw: str) -> SplitResponse:
    """
    Split the reply at the first separator occurrence.

    The separator is matched as a plain substring, so it is found mid-line
    too. Later occurrences stay inside the prompts block.
    """
    lesson, sep, rest = raw.partition(PROMPTS_SEPARATOR)
    if not sep:
        raise SeparatorNotFoundError(raw)
    return SplitResponse(lesson.strip(), rest.strip())


def parse_prompts(block: str) -> List[str]:
    prompts = []
    for line in block.split("\n"):
        line = _PROMPT_PREFIX.sub("", line).strip()
        if line:
            prompts.append(line)
    return prompts


def extract_sources(grounding_metadata) -> List[GroundingSource]:
    """
    Read citations from a Gemini ``GroundingMetadata``.

    Chunks without a web URI are kept; filtering happens when sources are
    shown (see ``schemas.displayable_sources``).
    """
    if grounding_metadata is None:
        return []

    sources = []
    for chunk in grounding_metadata.grounding_chunks or []:
        web = chunk.web
        sources.append(GroundingSource(
            uri=web.uri if web else None,
            title=web.title if web else None,
        ))
    return sources
