"""Token counting strategies used for chunk sizing.

The default counter is a whitespace word count, which is the size proxy every
chunk boundary is computed with. ``TiktokenCounter`` is opt-in: switching to it
changes chunk boundaries for the same input and must be treated as a
compatibility decision for any existing index.
"""

from typing import Protocol, runtime_checkable

import tiktoken


@runtime_checkable
class TokenCounter(Protocol):
    """Anything that can size a piece of text."""

    def count(self, text: str) -> int:
        """Return the size of ``text`` in tokens."""
        ...


class WordCounter:
    """Whitespace-delimited word count used as a token proxy."""

    def count(self, text: str) -> int:
        if not text or not text.strip():
            return 0
        return len(text.split())


class TiktokenCounter:
    """Subword token count using tiktoken's cl100k_base encoding."""

    def __init__(self, encoding_name: str = "cl100k_base") -> None:
        self._encoder = tiktoken.get_encoding(encoding_name)

    def count(self, text: str) -> int:
        if not text:
            return 0
        return len(self._encoder.encode(text))


def create_token_counter(name: str) -> TokenCounter:
    """Create a token counter by configuration name.

    Args:
        name: ``"words"`` or ``"tiktoken"``.

    Returns:
        TokenCounter instance.

    Raises:
        ValueError: If the name is unknown.
    """
    if name == "words":
        return WordCounter()
    if name == "tiktoken":
        return TiktokenCounter()
    raise ValueError(f"Unknown token counter: {name!r}")
