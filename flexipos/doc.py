from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional


def _normalize_attrs(attrs: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not attrs:
        return {}
    return dict(attrs)


class AttrsMixin:
    attrs: Dict[str, Any]

    def get_attr(self, name: str, default: str = "") -> str:
        value = self.attrs.get(name)
        return default if value is None else value

    def set_attr(self, name: str, value: Optional[str]) -> None:
        if value is None or value == "":
            self.attrs.pop(name, None)
        else:
            self.attrs[name] = value


@dataclass
class Token(AttrsMixin):
    """A word as produced by the tokenizer; ``pos`` is filled in by the tagger."""

    id: int
    form: str
    pos: Optional[str] = None
    lemma: str = ""
    upos: str = ""
    feats: str = ""
    head: int = 0
    deprel: str = ""
    deps: str = ""
    misc: str = ""
    attrs: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.attrs = _normalize_attrs(self.attrs)
        if self.pos == "":
            self.pos = None

    @property
    def has_pos(self) -> bool:
        return bool(self.pos)

    @classmethod
    def from_dict(cls, data: dict) -> "Token":
        return cls(
            id=int(data.get("id", 0)),
            form=data.get("form", ""),
            pos=data.get("pos") or data.get("xpos") or None,
            lemma=data.get("lemma", ""),
            upos=data.get("upos", ""),
            feats=data.get("feats", ""),
            head=int(data.get("head", 0)),
            deprel=data.get("deprel", ""),
            deps=data.get("deps", ""),
            misc=data.get("misc", ""),
            attrs=_normalize_attrs(data.get("attrs")),
        )

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "form": self.form,
            "pos": self.pos,
            "lemma": self.lemma,
            "upos": self.upos,
            "feats": self.feats,
            "head": self.head,
            "deprel": self.deprel,
            "deps": self.deps,
            "misc": self.misc,
        }
        if self.attrs:
            result["attrs"] = dict(self.attrs)
        return result


@dataclass
class Sentence(AttrsMixin):
    id: str = ""
    text: str = ""
    tokens: List[Token] = field(default_factory=list)
    attrs: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.attrs = _normalize_attrs(self.attrs)

    @property
    def forms(self) -> List[str]:
        return [token.form for token in self.tokens]

    @classmethod
    def from_forms(cls, forms: Iterable[str], *, id: str = "") -> "Sentence":
        tokens = [Token(id=idx + 1, form=form) for idx, form in enumerate(forms)]
        return cls(id=id, text=" ".join(tok.form for tok in tokens), tokens=tokens)

    @classmethod
    def from_dict(cls, data: dict) -> "Sentence":
        return cls(
            id=data.get("id", ""),
            text=data.get("text", ""),
            tokens=[Token.from_dict(t) for t in data.get("tokens", [])],
            attrs=_normalize_attrs(data.get("attrs")),
        )

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "text": self.text,
            "tokens": [tok.to_dict() for tok in self.tokens],
        }
        if self.attrs:
            result["attrs"] = dict(self.attrs)
        return result


@dataclass
class Document(AttrsMixin):
    id: str = ""
    sentences: List[Sentence] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)
    attrs: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.attrs = _normalize_attrs(self.attrs)

    @classmethod
    def from_sentences(cls, sentences: Iterable[Iterable[str]], *, doc_id: str = "") -> "Document":
        """Build a document from already tokenized sentences (lists of word forms)."""
        document = cls(id=doc_id)
        for idx, forms in enumerate(sentences, start=1):
            document.sentences.append(Sentence.from_forms(forms, id=f"s{idx}"))
        return document

    def words(self, sentence_index: int) -> List[Token]:
        """Words of the sentence at ``sentence_index``, in order."""
        return self.sentences[sentence_index].tokens

    def tokens(self) -> Iterable[Token]:
        for sentence in self.sentences:
            yield from sentence.tokens

    def pos_tags(self) -> List[List[Optional[str]]]:
        return [[tok.pos for tok in sentence.tokens] for sentence in self.sentences]

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        return cls(
            id=data.get("id", ""),
            sentences=[Sentence.from_dict(s) for s in data.get("sentences", [])],
            meta=dict(data.get("meta", {})),
            attrs=_normalize_attrs(data.get("attrs")),
        )

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "sentences": [sent.to_dict() for sent in self.sentences],
            "meta": dict(self.meta),
        }
        if self.attrs:
            result["attrs"] = dict(self.attrs)
        return result
