"""SpaCy backend: runs a loaded pipeline over pre-tokenized sentences."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from ..backend_spec import BackendSpec
from ..errors import ConfigurationError

SPACY_DEFAULT_MODEL = "en_core_web_sm"


class SpacyBackend:
    """Fine tags from ``token.tag_`` (or ``token.pos_`` with ``attribute="pos_"``)."""

    def __init__(self, model: Optional[str] = None, *, attribute: str = "tag_", disable: Optional[List[str]] = None):
        import spacy
        from spacy.tokens import Doc

        if attribute not in {"tag_", "pos_"}:
            raise ConfigurationError(f"Unsupported spaCy attribute '{attribute}' (use 'tag_' or 'pos_')")
        model_name = model or SPACY_DEFAULT_MODEL
        try:
            self.nlp = spacy.load(model_name, disable=disable or [])
        except OSError as exc:
            hint = "" if Path(model_name).exists() else f" Download it with: python -m spacy download {model_name}"
            raise ConfigurationError(f"Cannot load spaCy model '{model_name}': {exc}.{hint}") from exc
        self._doc_class = Doc
        self.attribute = attribute
        self.model_name = model_name

    def tag(self, tokens: Sequence[str]) -> List[str]:
        # pre-tokenized Doc so spaCy does not re-tokenize
        doc = self._doc_class(self.nlp.vocab, words=list(tokens))
        doc = self.nlp(doc)
        return [getattr(token, self.attribute) for token in doc]


def _create_spacy_backend(*, model: Optional[str] = None, attribute: str = "tag_", disable: Optional[List[str]] = None):
    return SpacyBackend(model, attribute=attribute, disable=disable)


BACKEND_SPEC = BackendSpec(
    name="spacy",
    description="spaCy pipeline tagger (fine tags from token.tag_)",
    factory=_create_spacy_backend,
    requires="spacy",
    install_hint='pip install "flexipos[spacy]"',
    url="https://spacy.io",
)
