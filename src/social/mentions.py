"""
@mention text helpers.

mentioned_names() is used server-side: ContentManager resolves the @names in
a comment or reply into mentioned_users. split_mentions(),
active_mention_query() and insert_mention() serve the comment composer and
renderer on the client.
"""
import re
from typing import List, Optional, Tuple

MENTION_RE = re.compile(r"@(\w+)")
ACTIVE_MENTION_RE = re.compile(r"@(\w*)$")


def split_mentions(text: str) -> List[Tuple[str, bool]]:
    """
    Split text into (segment, is_mention) pairs; mention segments carry the
    bare name without the '@'. Empty plain segments are dropped.

    >>> split_mentions("hi @ann and @bo!")
    [('hi ', False), ('ann', True), (' and ', False), ('bo', True), ('!', False)]
    """
    parts = []
    pos = 0
    for m in MENTION_RE.finditer(text):
        if m.start() > pos:
            parts.append((text[pos:m.start()], False))
        parts.append((m.group(1), True))
        pos = m.end()
    if pos < len(text):
        parts.append((text[pos:], False))
    return parts


def mentioned_names(text: str) -> List[str]:
    return MENTION_RE.findall(text)


def active_mention_query(text_before_cursor: str) -> Optional[str]:
    """The partial name being typed after a trailing '@', or None."""
    m = ACTIVE_MENTION_RE.search(text_before_cursor)
    return m.group(1) if m else None


def insert_mention(text_before_cursor: str, text_after_cursor: str, display_name: str) -> str:
    """Replace the trailing '@partial' before the cursor with '@display_name '."""
    m = ACTIVE_MENTION_RE.search(text_before_cursor)
    before = text_before_cursor[:m.start()] if m else text_before_cursor
    return f"{before}@{display_name} {text_after_cursor}"
