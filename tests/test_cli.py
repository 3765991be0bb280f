from __future__ import annotations

import json

from flexipos.__main__ import main

INPUT = """# sent_id = s1
1\tThe\t_\t_\t_\t_\t_\t_\t_\t_
2\tdog\t_\t_\t_\t_\t_\t_\t_\t_
3\tbarks\t_\t_\t_\t_\t_\t_\t_\t_

# sent_id = s2
1\tHello\t_\t_\t_\t_\t_\t_\t_\t_

"""


def _xpos_column(text):
    return [line.split("\t")[4] for line in text.splitlines() if line and not line.startswith("#")]


def test_tag_command_writes_mapped_tags(tmp_path, vocab_model, pos_map_file):
    source = tmp_path / "in.conllu"
    source.write_text(INPUT, encoding="utf-8")
    target = tmp_path / "out.conllu"

    code = main(["tag", str(source), "--model", str(vocab_model), "--pos-map", str(pos_map_file), "-o", str(target)])

    assert code == 0
    assert _xpos_column(target.read_text(encoding="utf-8")) == ["DET", "NOUN", "VERB", "UH"]


def test_tag_command_reads_properties_file(tmp_path, vocab_model, pos_map_file):
    source = tmp_path / "in.conllu"
    source.write_text(INPUT, encoding="utf-8")
    config = tmp_path / "tagger.config"
    config.write_text(f"en.postagger.model = {vocab_model}\nen.postagger.posMap = {pos_map_file}\n", encoding="utf-8")
    target = tmp_path / "out.json"

    code = main(["tag", str(source), "--config", str(config), "--prefix", "en.postagger", "--output-format", "json", "-o", str(target)])

    assert code == 0
    data = json.loads(target.read_text(encoding="utf-8"))
    tags = [[tok["pos"] for tok in sent["tokens"]] for sent in data["sentences"]]
    assert tags == [["DET", "NOUN", "VERB"], ["UH"]]


def test_tag_command_several_inputs(tmp_path, vocab_model):
    inputs = []
    for name in ("a", "b", "c"):
        path = tmp_path / f"{name}.conllu"
        path.write_text(INPUT, encoding="utf-8")
        inputs.append(str(path))
    out_dir = tmp_path / "out"

    code = main(["tag", *inputs, "--model", str(vocab_model), "--workers", "3", "--output-dir", str(out_dir)])

    assert code == 0
    for name in ("a", "b", "c"):
        assert _xpos_column((out_dir / f"{name}.conllu").read_text(encoding="utf-8")) == ["DT", "NN", "VBZ", "UH"]


def test_tag_command_configuration_error(tmp_path, vocab_model, capsys):
    source = tmp_path / "in.conllu"
    source.write_text(INPUT, encoding="utf-8")

    code = main(["tag", str(source), "--model", str(vocab_model), "--pos-map", str(tmp_path / "missing.map")])

    assert code == 1
    assert "POS map file not found" in capsys.readouterr().err


def test_backends_command_lists_builtin_backends(capsys):
    assert main(["backends"]) == 0
    out = capsys.readouterr().out
    for name in ("vocab", "spacy", "stanza", "flair"):
        assert name in out
