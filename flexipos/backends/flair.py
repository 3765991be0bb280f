"""Flair backend: a ``SequenceTagger`` applied to pre-tokenized sentences."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..backend_spec import BackendSpec
from ..errors import ConfigurationError

FLAIR_DEFAULT_MODEL = "flair/pos-english"


class FlairBackend:
    def __init__(self, model: Optional[str] = None, *, tag_type: Optional[str] = None):
        from flair.data import Sentence
        from flair.models import SequenceTagger

        model_name = model or FLAIR_DEFAULT_MODEL
        try:
            self._tagger = SequenceTagger.load(model_name)
        except Exception as exc:
            raise ConfigurationError(f"Cannot load Flair model '{model_name}': {exc}") from exc
        self._sentence_class = Sentence
        self.tag_type = tag_type or self._tagger.tag_type

    def tag(self, tokens: Sequence[str]) -> List[str]:
        sentence = self._sentence_class(list(tokens))
        self._tagger.predict(sentence, verbose=False)
        return [token.get_label(self.tag_type).value for token in sentence.tokens]


def _create_flair_backend(*, model: Optional[str] = None, tag_type: Optional[str] = None):
    return FlairBackend(model, tag_type=tag_type)


BACKEND_SPEC = BackendSpec(
    name="flair",
    description="Flair SequenceTagger POS model",
    factory=_create_flair_backend,
    requires="flair",
    install_hint='pip install "flexipos[flair]"',
    url="https://github.com/flairNLP/flair",
)
