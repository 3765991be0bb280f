from __future__ import annotations

import io

import pytest

from flexipos.errors import ConfigurationError
from flexipos.tag_mapping import MappingStatus, TagMapper


def test_from_lines_skips_comments_and_blank_lines():
    mapper = TagMapper.from_lines(["# comment", "", "   ", "NN NOUN", "VB\tVERB", "  # indented comment"])
    assert mapper.enabled
    assert mapper.as_dict() == {"NN": "NOUN", "VB": "VERB"}
    assert len(mapper) == 2
    assert "NN" in mapper
    assert "JJ" not in mapper


def test_malformed_line_reports_source_and_line_number():
    with pytest.raises(ConfigurationError) as excinfo:
        TagMapper.from_lines(["NN NOUN", "VB"], source="penn.map")
    assert "penn.map:2" in str(excinfo.value)


def test_extra_fields_are_ignored_and_last_entry_wins():
    mapper = TagMapper.from_lines(["NN NOUN common", "NN PROPN"])
    assert mapper.resolve("NN").tag == "PROPN"


def test_resolve_variants_are_distinct():
    mapper = TagMapper({"NN": "NOUN"})
    resolved = mapper.resolve("NN")
    unresolved = mapper.resolve("XX")
    disabled = TagMapper.disabled().resolve("XX")

    assert resolved.status is MappingStatus.RESOLVED and resolved.tag == "NOUN"
    assert unresolved.status is MappingStatus.UNRESOLVED and unresolved.tag is None
    assert disabled.status is MappingStatus.DISABLED and disabled.tag == "XX"
    assert unresolved.unresolved and not disabled.unresolved
    assert unresolved.value_or("XX") == "XX"


def test_disabled_mapper_is_identity():
    mapper = TagMapper.disabled()
    assert not mapper.enabled
    for tag in ["NN", "VBZ", ".", "$", "weird-tag"]:
        assert mapper.resolve(tag).value_or("fallback") == tag


def test_from_path_none_is_disabled():
    assert not TagMapper.from_path(None).enabled


def test_from_path_missing_file_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        TagMapper.from_path(tmp_path / "missing.map")


def test_from_path_reads_utf8(tmp_path):
    path = tmp_path / "de.map"
    path.write_text("ADJA ADJ\nKÖN CONJ\n", encoding="utf-8")
    mapper = TagMapper.from_path(path)
    assert mapper.resolve("KÖN").tag == "CONJ"


def test_from_stream_accepts_text_and_binary():
    text_mapper = TagMapper.from_stream(io.StringIO("NN NOUN\n"))
    binary_mapper = TagMapper.from_stream(io.BytesIO("NN NOUN\nNE PROPN\n".encode("utf-8")))
    assert text_mapper.as_dict() == {"NN": "NOUN"}
    assert binary_mapper.as_dict() == {"NN": "NOUN", "NE": "PROPN"}


def test_mapping_is_copied_and_read_only():
    source = {"NN": "NOUN"}
    mapper = TagMapper(source)
    source["NN"] = "CHANGED"
    assert mapper.resolve("NN").tag == "NOUN"
    exported = mapper.as_dict()
    exported["VB"] = "VERB"
    assert "VB" not in mapper
