from __future__ import annotations

import json

import pytest

from flexipos.backend_registry import create_backend, get_backend_choices, get_backend_spec, is_backend_available
from flexipos.backend_spec import TaggingBackend
from flexipos.backends.vocab import VocabBackend
from flexipos.errors import ConfigurationError


def test_builtin_backends_are_registered():
    choices = get_backend_choices()
    for name in ("vocab", "spacy", "stanza", "flair"):
        assert name in choices
    assert is_backend_available("vocab")
    assert not is_backend_available("does-not-exist")


def test_unknown_backend_is_configuration_error():
    with pytest.raises(ConfigurationError) as excinfo:
        create_backend("does-not-exist")
    assert "vocab" in str(excinfo.value)


def test_vocab_backend_picks_most_frequent_tag(vocab_model):
    backend = create_backend("vocab", model=str(vocab_model))
    assert isinstance(backend, TaggingBackend)
    assert backend.tag(["barks"]) == ["VBZ"]


def test_vocab_backend_lowercase_and_default(vocab_model):
    backend = VocabBackend.from_file(vocab_model)
    assert backend.tag(["The", "Dog", "zebra", "Hello"]) == ["DT", "NN", "NN", "UH"]
    assert backend.default_tag == "NN"


def test_vocab_backend_tag_field(vocab_model):
    backend = VocabBackend.from_file(vocab_model, tag_field="upos")
    assert backend.tag(["the", "barks", "."]) == ["DET", "VERB", "PUNCT"]


def test_vocab_backend_accepts_model_directory(vocab_model):
    backend = create_backend("vocab", model=str(vocab_model.parent))
    assert len(backend) == 5


def test_vocab_backend_plain_mapping_without_vocab_key(tmp_path):
    path = tmp_path / "flat.json"
    path.write_text(json.dumps({"cat": "NN", "sat": {"xpos": "VBD"}}), encoding="utf-8")
    backend = VocabBackend.from_file(path, default_tag="X")
    assert backend.tag(["cat", "sat", "on"]) == ["NN", "VBD", "X"]


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", '{"vocab": []}'])
def test_vocab_backend_invalid_model(tmp_path, content):
    path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        VocabBackend.from_file(path)


def test_vocab_backend_requires_model():
    with pytest.raises(ConfigurationError):
        create_backend("vocab")


def test_vocab_backend_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        create_backend("vocab", model=str(tmp_path / "missing.json"))


def test_optional_backends_declare_requirements():
    for name in ("spacy", "stanza", "flair"):
        spec = get_backend_spec(name)
        assert spec.requires == name
        assert spec.install_hint
