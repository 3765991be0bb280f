from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

from .conllu import conllu_to_document, document_to_conllu
from .doc import Document


@dataclass
class FormatEntry:
    name: str
    aliases: tuple[str, ...]
    extensions: tuple[str, ...]
    loader: Callable[..., Document]
    dumper: Callable[..., str]
    description: str = ""

    def matches(self, value: str) -> bool:
        normalized = value.lower()
        return normalized == self.name.lower() or normalized in self.aliases

    def load(self, text: str, *, doc_id: Optional[str] = None) -> Document:
        return self.loader(text, doc_id=doc_id)

    def dump(self, document: Document, **kwargs) -> str:
        return self.dumper(document, **kwargs)


class IORegistry:
    def __init__(self) -> None:
        self._formats: Dict[str, FormatEntry] = {}
        self._extensions: Dict[str, FormatEntry] = {}

    def register(self, entry: FormatEntry) -> None:
        self._formats[entry.name.lower()] = entry
        for alias in entry.aliases:
            self._formats[alias.lower()] = entry
        for ext in entry.extensions:
            self._extensions[ext.lower()] = entry

    def get(self, name: str) -> Optional[FormatEntry]:
        if not name:
            return None
        return self._formats.get(name.lower())

    def detect(self, path: Optional[str], default: str = "conllu") -> FormatEntry:
        if path and path != "-":
            entry = self._extensions.get(Path(path).suffix.lower())
            if entry:
                return entry
        return self._formats[default]

    def names(self) -> list[str]:
        return sorted({entry.name for entry in self._formats.values()})


def _load_json(text: str, *, doc_id: Optional[str] = None) -> Document:
    data = json.loads(text)
    document = Document.from_dict(data)
    if doc_id and not document.id:
        document.id = doc_id
    return document


def _dump_json(document: Document, **kwargs) -> str:
    return json.dumps(document.to_dict(), ensure_ascii=False, indent=2) + "\n"


def _dump_conllu(document: Document, *, model: Optional[str] = None, **kwargs) -> str:
    return document_to_conllu(document, model=model)


registry = IORegistry()

registry.register(
    FormatEntry(
        name="conllu",
        aliases=("conll-u", "conll"),
        extensions=(".conllu", ".conll"),
        loader=conllu_to_document,
        dumper=_dump_conllu,
        description="CoNLL-U; POS tags are read from and written to the XPOS column.",
    )
)

registry.register(
    FormatEntry(
        name="json",
        aliases=(),
        extensions=(".json",),
        loader=_load_json,
        dumper=_dump_json,
        description="Document JSON (Document.to_dict).",
    )
)
