"""Lexicon backend: most frequent tag per word form from a JSON vocabulary."""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..backend_spec import BackendSpec
from ..errors import ConfigurationError

DEFAULT_TAG = "X"


def _iter_analyses(value) -> Iterable[Tuple[Dict, int]]:
    if isinstance(value, list):
        for analysis in value:
            if isinstance(analysis, dict):
                yield analysis, int(analysis.get("count", 1))
    elif isinstance(value, dict):
        yield value, int(value.get("count", 1))
    elif isinstance(value, str):
        yield {"xpos": value}, 1


class VocabBackend:
    """Tag each token with the most frequent tag recorded for its form.

    The vocabulary follows the flexitag ``model_vocab.json`` layout::

        {"vocab": {"dogs": [{"xpos": "NNS", "upos": "NOUN", "count": 12}]},
         "default_tag": "NN"}

    Lookup tries the exact form first, then the lowercased form, and falls
    back to the default tag.
    """

    def __init__(
        self,
        vocab: Mapping[str, object],
        *,
        tag_field: str = "xpos",
        default_tag: str = DEFAULT_TAG,
    ) -> None:
        self.tag_field = tag_field
        self.default_tag = default_tag
        self._best: Dict[str, str] = {}
        lower_counts: Dict[str, Counter] = {}
        for form, value in vocab.items():
            counter: Counter = Counter()
            for analysis, count in _iter_analyses(value):
                tag = analysis.get(tag_field) or analysis.get("upos") or analysis.get("xpos")
                if tag:
                    counter[tag] += max(count, 1)
            if not counter:
                continue
            self._best[form] = counter.most_common(1)[0][0]
            lower_counts.setdefault(form.lower(), Counter()).update(counter)
        self._best_lower = {form: counts.most_common(1)[0][0] for form, counts in lower_counts.items()}

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs) -> "VocabBackend":
        path = Path(path)
        if path.is_dir():
            candidate = path / "model_vocab.json"
            if not candidate.exists():
                raise ConfigurationError(f"No model_vocab.json found inside model directory: {path}")
            path = candidate
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Model file not found: {path}") from exc
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"Invalid vocabulary model {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid vocabulary model {path}: expected a JSON object")
        vocab = data.get("vocab", data)
        if not isinstance(vocab, dict):
            raise ConfigurationError(f"Invalid vocabulary model {path}: 'vocab' must be an object")
        if "default_tag" in data and "default_tag" not in kwargs:
            kwargs["default_tag"] = str(data["default_tag"])
        if "vocab" not in data:
            vocab = {k: v for k, v in vocab.items() if k != "default_tag"}
        return cls(vocab, **kwargs)

    def lookup(self, form: str) -> Optional[str]:
        return self._best.get(form) or self._best_lower.get(form.lower())

    def tag(self, tokens: Sequence[str]) -> List[str]:
        return [self.lookup(token) or self.default_tag for token in tokens]

    def __len__(self) -> int:
        return len(self._best)


def _create_vocab_backend(
    *,
    model: Optional[str] = None,
    tag_field: str = "xpos",
    default_tag: Optional[str] = None,
) -> VocabBackend:
    if not model:
        raise ConfigurationError("The vocab backend requires a model (path to a JSON vocabulary)")
    kwargs = {"tag_field": tag_field}
    if default_tag:
        kwargs["default_tag"] = default_tag
    return VocabBackend.from_file(model, **kwargs)


BACKEND_SPEC = BackendSpec(
    name="vocab",
    description="Most-frequent-tag lexicon from a flexitag-style JSON vocabulary",
    factory=_create_vocab_backend,
)
