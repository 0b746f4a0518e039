"""Text normalization applied to chunk content before enrichment."""

import re

HTML_TAG_PATTERN = re.compile(r"<[^>]+>")
# Keep word characters, whitespace, periods, underscores and dashes
DISALLOWED_CHARS_PATTERN = re.compile(r"[^\w\s.\-_]")
WHITESPACE_PATTERN = re.compile(r"\s+")


def clean_text(content: str) -> str:
    """Normalize chunk content for key-phrase, entity and embedding calls.

    Steps:
    1. Replace HTML tags with a space
    2. Replace characters other than word characters, whitespace, ``.``,
       ``_`` and ``-`` with a space
    3. Lowercase
    4. Collapse whitespace runs and trim

    Args:
        content: Raw chunk content (text or table HTML).

    Returns:
        Cleaned text, or an empty string for blank input.

    Example:
        >>> clean_text("<table><tr><td>Net Income (USD)</td></tr></table>")
        'net income usd'
    """
    if not content or not content.strip():
        return ""

    cleaned = HTML_TAG_PATTERN.sub(" ", content)
    cleaned = DISALLOWED_CHARS_PATTERN.sub(" ", cleaned)
    cleaned = cleaned.lower()
    return WHITESPACE_PATTERN.sub(" ", cleaned).strip()
