"""Fine-to-coarse POS tag mapping tables.

A mapping table is a plain UTF-8 text file with one ``FINE COARSE`` pair per
line. Blank lines and lines starting with ``#`` are ignored::

    # Penn Treebank -> coarse tags
    NN   NOUN
    NNS  NOUN
    VB   VERB

The table is built once and is read-only afterwards, so a single ``TagMapper``
can be shared between threads without locking.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import IO, Dict, Iterable, Mapping, Optional, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"


class MappingStatus(str, Enum):
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    DISABLED = "disabled"


@dataclass(frozen=True)
class TagResolution:
    """Outcome of looking up one fine tag."""

    status: MappingStatus
    tag: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.status is MappingStatus.RESOLVED

    @property
    def unresolved(self) -> bool:
        return self.status is MappingStatus.UNRESOLVED

    def value_or(self, fallback: str) -> str:
        return fallback if self.tag is None else self.tag


class TagMapper:
    """Translate tagger output into a coarser tagset when a table is configured."""

    def __init__(self, mapping: Optional[Mapping[str, str]] = None) -> None:
        if mapping is None:
            self._mapping: Optional[Mapping[str, str]] = None
        else:
            self._mapping = MappingProxyType(dict(mapping))

    @classmethod
    def disabled(cls) -> "TagMapper":
        return cls(None)

    @classmethod
    def from_lines(cls, lines: Iterable[str], *, source: str = "<lines>") -> "TagMapper":
        mapping: Dict[str, str] = {}
        for lineno, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()
            if not line or line.startswith(COMMENT_PREFIX):
                continue
            fields = line.split()
            if len(fields) < 2:
                raise ConfigurationError(
                    f"{source}:{lineno}: expected 'FINE_TAG COARSE_TAG', got {raw_line.rstrip()!r}"
                )
            fine, coarse = fields[0], fields[1]
            if fine in mapping and mapping[fine] != coarse:
                logger.debug("%s:%d: '%s' remapped from '%s' to '%s'", source, lineno, fine, mapping[fine], coarse)
            mapping[fine] = coarse
        logger.debug("Loaded %d POS mapping entries from %s", len(mapping), source)
        return cls(mapping)

    @classmethod
    def from_stream(cls, stream: Union[IO[str], IO[bytes]], *, source: Optional[str] = None) -> "TagMapper":
        source = source or getattr(stream, "name", None) or "<stream>"
        if isinstance(stream, io.TextIOBase):
            return cls.from_lines(stream, source=str(source))
        text_stream = io.TextIOWrapper(stream, encoding="utf-8")  # type: ignore[arg-type]
        try:
            return cls.from_lines(text_stream, source=str(source))
        except UnicodeDecodeError as exc:
            raise ConfigurationError(f"{source}: POS map is not valid UTF-8: {exc}") from exc
        finally:
            text_stream.detach()

    @classmethod
    def from_path(cls, path: Optional[Union[str, Path]]) -> "TagMapper":
        """Load a mapping file.

        Only an unconfigured path (``None`` or empty) disables mapping. A path
        that is configured but cannot be read raises :class:`ConfigurationError`.
        """
        if path is None or str(path) == "":
            return cls.disabled()
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(f"POS map file not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as handle:
                return cls.from_lines(handle, source=str(path))
        except UnicodeDecodeError as exc:
            raise ConfigurationError(f"{path}: POS map is not valid UTF-8: {exc}") from exc
        except OSError as exc:
            raise ConfigurationError(f"Cannot read POS map file {path}: {exc}") from exc

    @property
    def enabled(self) -> bool:
        return self._mapping is not None

    def resolve(self, fine_tag: str) -> TagResolution:
        if self._mapping is None:
            return TagResolution(MappingStatus.DISABLED, fine_tag)
        coarse = self._mapping.get(fine_tag)
        if coarse is None:
            return TagResolution(MappingStatus.UNRESOLVED)
        return TagResolution(MappingStatus.RESOLVED, coarse)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._mapping or {})

    def __len__(self) -> int:
        return len(self._mapping or {})

    def __contains__(self, fine_tag: object) -> bool:
        return self._mapping is not None and fine_tag in self._mapping

    def __repr__(self) -> str:
        if self._mapping is None:
            return "TagMapper(disabled)"
        return f"TagMapper({len(self._mapping)} entries)"
