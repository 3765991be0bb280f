"""
Configuration classes for flexipos.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from .errors import ConfigurationError

if TYPE_CHECKING:  # pragma: no cover
    from .tagger import SentenceTagger

DEFAULT_BACKEND = "vocab"


def normalize_prefix(prefix: str) -> str:
    """Property prefixes always end with a dot (``en.postagger`` -> ``en.postagger.``)."""
    if not prefix:
        return ""
    return prefix if prefix.endswith(".") else prefix + "."


@dataclass
class TaggerConfig:
    """Configuration for the POS tagging stage."""
    backend: str = DEFAULT_BACKEND  # Registered backend name (see `python -m flexipos backends`)
    model: Optional[str] = None  # Model path or name, interpreted by the backend
    pos_map: Optional[Path] = None  # Optional fine -> coarse tag table; None disables mapping
    padding_token: str = "."  # Appended to single-token sentences before tagging
    respect_existing: bool = True  # Keep POS tags that are already present
    max_workers: int = 1  # Documents tagged in parallel by TaggingPipeline
    backend_options: Dict[str, Any] = field(default_factory=dict)
    debug: bool = False

    def __post_init__(self):
        if self.pos_map is not None and not isinstance(self.pos_map, Path):
            self.pos_map = Path(self.pos_map)
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")

    @classmethod
    def from_properties(cls, properties: Mapping[str, str], prefix: str, **overrides: Any) -> "TaggerConfig":
        """Read ``<prefix>model``, ``<prefix>posMap``, ``<prefix>backend`` and ``<prefix>paddingToken``."""
        prefix = normalize_prefix(prefix)
        model = properties.get(prefix + "model")
        if not model:
            raise ConfigurationError(f"Missing required property '{prefix}model'")
        values: Dict[str, Any] = {
            "model": model,
            "pos_map": properties.get(prefix + "posMap") or None,
            "backend": properties.get(prefix + "backend") or DEFAULT_BACKEND,
        }
        padding = properties.get(prefix + "paddingToken")
        if padding:
            values["padding_token"] = padding
        values.update(overrides)
        return cls(**values)

    @staticmethod
    def load_properties(path: Union[str, Path]) -> Dict[str, str]:
        """Parse a Java-style ``.properties`` file (``key = value`` or ``key: value``)."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc
        properties: Dict[str, str] = {}
        for lineno, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line[0] in "#!":
                continue
            separators = [pos for pos in (line.find("="), line.find(":")) if pos > 0]
            if not separators:
                raise ConfigurationError(f"{path}:{lineno}: expected 'key = value', got {raw_line!r}")
            split_at = min(separators)
            properties[line[:split_at].strip()] = line[split_at + 1 :].strip()
        return properties


def build_tagger(config: TaggerConfig) -> "SentenceTagger":
    """Create the backend, mapper and tagger described by ``config``."""
    from .backend_registry import create_backend
    from .tag_mapping import TagMapper
    from .tagger import SentenceTagger

    options = dict(config.backend_options)
    if config.model is not None:
        options.setdefault("model", config.model)
    backend = create_backend(config.backend, **options)
    mapper = TagMapper.from_path(config.pos_map)
    return SentenceTagger(
        backend,
        mapper,
        padding_token=config.padding_token,
        respect_existing=config.respect_existing,
    )
