from __future__ import annotations

from flexipos.conllu import conllu_to_document, document_to_conllu
from flexipos.doc import Document
from flexipos.io_registry import registry

SAMPLE = """# generator = upstream
# newdoc id = news1
# sent_id = 1
# text = The dog barks.
1\tThe\tthe\tDET\tDT\t_\t2\tdet\t_\t_
2\tdog\tdog\tNOUN\t_\t_\t3\tnsubj\t_\t_
3\tbarks\tbark\tVERB\t_\t_\t0\troot\t_\tSpaceAfter=No
4\t.\t.\tPUNCT\t_\t_\t3\tpunct\t_\t_

# sent_id = 2
# speaker = A
1-2\tdon't\t_\t_\t_\t_\t_\t_\t_\t_
1\tdo\tdo\tAUX\t_\t_\t_\t_\t_\t_
2\tn't\tnot\tPART\t_\t_\t_\t_\t_\t_

"""


def test_parse_reads_xpos_into_pos():
    doc = conllu_to_document(SAMPLE)
    assert doc.id == "news1"
    assert doc.meta["generator"] == "upstream"
    assert [s.id for s in doc.sentences] == ["1", "2"]
    first = doc.sentences[0]
    assert first.text == "The dog barks."
    assert [tok.pos for tok in first.tokens] == ["DT", None, None, None]
    assert first.tokens[2].misc == "SpaceAfter=No"
    assert first.tokens[2].head == 0
    assert doc.sentences[1].attrs["speaker"] == "A"
    assert [tok.form for tok in doc.sentences[1].tokens] == ["do", "n't"]


def test_write_puts_pos_in_xpos_column_and_keeps_ranges():
    doc = conllu_to_document(SAMPLE)
    for token in doc.tokens():
        if token.pos is None:
            token.pos = "TAG"
    text = document_to_conllu(doc)

    lines = text.splitlines()
    assert "# newdoc id = news1" in lines
    assert "1\tThe\tthe\tDET\tDT\t_\t2\tdet\t_\t_" in lines
    assert "2\tdog\tdog\tNOUN\tTAG\t_\t3\tnsubj\t_\t_" in lines
    assert "# speaker = A" in lines
    range_index = lines.index("1-2\tdon't\t_\t_\t_\t_\t_\t_\t_\t_")
    assert lines[range_index + 1].startswith("1\tdo\t")
    assert text.endswith("\n\n")


def test_reparse_of_written_document_is_stable():
    doc = conllu_to_document(SAMPLE)
    again = conllu_to_document(document_to_conllu(doc))
    assert again.pos_tags() == doc.pos_tags()
    assert [s.id for s in again.sentences] == ["1", "2"]
    assert again.sentences[0].text == "The dog barks."
    assert again.sentences[1].attrs["speaker"] == "A"


def test_registry_detects_formats_by_extension():
    assert registry.detect("input.conllu").name == "conllu"
    assert registry.detect("input.json").name == "json"
    assert registry.detect("-").name == "conllu"
    assert registry.get("conll-u").name == "conllu"


def test_json_format_round_trip():
    doc = Document.from_sentences([["Hello"]], doc_id="greeting")
    doc.sentences[0].tokens[0].pos = "UH"
    entry = registry.get("json")
    loaded = entry.load(entry.dump(doc))
    assert loaded.id == "greeting"
    assert loaded.pos_tags() == [["UH"]]
