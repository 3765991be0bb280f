"""Exception and warning types raised by the tagging stage."""

from __future__ import annotations

from typing import Optional, Sequence


class FlexiposError(Exception):
    """Base class for flexipos errors."""


class ConfigurationError(FlexiposError, ValueError):
    """Invalid startup configuration: mapping table, model resource or backend."""


class AlignmentError(FlexiposError, RuntimeError):
    """The tagging capability returned tags that cannot be paired with the tokens."""

    def __init__(
        self,
        message: str,
        *,
        sentence_index: Optional[int] = None,
        tokens: Sequence[str] = (),
        tags: Sequence[object] = (),
    ) -> None:
        super().__init__(message)
        self.sentence_index = sentence_index
        self.tokens = list(tokens)
        self.tags = list(tags)


class UnresolvedMappingWarning(UserWarning):
    """A fine tag had no entry in the mapping table; the raw tag was kept."""

    def __init__(self, tag: str, *, sentence_index: Optional[int] = None, token_index: Optional[int] = None) -> None:
        super().__init__(f"POS map incomplete: do not know how to map '{tag}'")
        self.tag = tag
        self.sentence_index = sentence_index
        self.token_index = token_index
