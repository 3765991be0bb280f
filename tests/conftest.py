from __future__ import annotations

import json
import threading
import time
from typing import Dict, List, Optional, Sequence

import pytest

from flexipos.doc import Document


class RecordingBackend:
    """Returns scripted tags and remembers every token batch it was given."""

    def __init__(self, lexicon: Optional[Dict[str, str]] = None, default: str = "NN", delay: float = 0.0):
        self.lexicon = dict(lexicon or {})
        self.default = default
        self.delay = delay
        self.calls: List[List[str]] = []
        self.active = 0
        self.max_active = 0
        self._counter_lock = threading.Lock()

    def tag(self, tokens: Sequence[str]) -> List[str]:
        with self._counter_lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            self.calls.append(list(tokens))
            if self.delay:
                time.sleep(self.delay)
            return [self.lexicon.get(token, self.default) for token in tokens]
        finally:
            with self._counter_lock:
                self.active -= 1


class FixedBackend:
    """Always returns the same tag list, whatever the input."""

    def __init__(self, tags: Sequence[object]):
        self.tags = list(tags)
        self.calls: List[List[str]] = []

    def tag(self, tokens: Sequence[str]) -> List[object]:
        self.calls.append(list(tokens))
        return list(self.tags)


@pytest.fixture
def penn_backend() -> RecordingBackend:
    return RecordingBackend(
        {
            "The": "DT",
            "dog": "NN",
            "barks": "VBZ",
            "Hello": "NNP",
            "runs": "VBZ",
            ".": ".",
        }
    )


@pytest.fixture
def sample_document() -> Document:
    return Document.from_sentences(
        [
            ["The", "dog", "barks", "."],
            ["Hello"],
            ["The", "dog", "runs"],
        ],
        doc_id="sample",
    )


@pytest.fixture
def vocab_model(tmp_path):
    path = tmp_path / "model_vocab.json"
    payload = {
        "vocab": {
            "the": [{"xpos": "DT", "upos": "DET", "count": 50}],
            "dog": [{"xpos": "NN", "upos": "NOUN", "count": 7}],
            "barks": [
                {"xpos": "VBZ", "upos": "VERB", "count": 5},
                {"xpos": "NNS", "upos": "NOUN", "count": 2},
            ],
            "Hello": {"xpos": "UH", "upos": "INTJ", "count": 3},
            ".": {"xpos": ".", "upos": "PUNCT", "count": 100},
        },
        "default_tag": "NN",
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def pos_map_file(tmp_path):
    path = tmp_path / "penn.map"
    path.write_text(
        "# Penn -> coarse\n"
        "\n"
        "DT  DET\n"
        "NN  NOUN\n"
        "VBZ VERB\n"
        ".   PUNCT\n",
        encoding="utf-8",
    )
    return path
