from __future__ import annotations

from typing import Dict, List, Optional

from .doc import Document, Sentence, Token

DEFAULT_GENERATOR = "flexipos"
FILE_LEVEL_KEYS = {"generator", "model"}

# multiword-token ranges (1-2) and empty nodes (3.1) are kept verbatim
_EXTRA_LINES_ATTR = "_extra_lines"


def _unescape(value: str) -> str:
    return "" if value == "_" else value


def _escape(value: Optional[str]) -> str:
    return value if value else "_"


def _parse_token_line(line: str, lineno: int) -> Token:
    cols = line.split("\t")
    if len(cols) != 10:
        raise ValueError(f"line {lineno}: expected 10 tab-separated CoNLL-U columns, got {len(cols)}")
    head = cols[6]
    return Token(
        id=int(cols[0]),
        form=cols[1],
        lemma=_unescape(cols[2]),
        upos=_unescape(cols[3]),
        pos=_unescape(cols[4]) or None,
        feats=_unescape(cols[5]),
        head=int(head) if head.isdigit() else 0,
        deprel=_unescape(cols[7]),
        deps=_unescape(cols[8]),
        misc=_unescape(cols[9]),
    )


def conllu_to_document(conllu_text: str, doc_id: str | None = None) -> Document:
    """
    Parse CoNLL-U text into a Document.

    The XPOS column becomes ``Token.pos``; ``_`` means no tag yet. Comment
    lines of the form ``# key = value`` become sentence attributes, with
    ``sent_id`` and ``text`` mapped to ``Sentence.id`` and ``Sentence.text``.
    """
    document = Document(id=doc_id or "")
    current: Sentence | None = None
    extra: List[List[str]] = []

    def _finish() -> None:
        nonlocal current, extra
        if current is None:
            return
        if not current.tokens:
            current = None
            extra = []
            return
        if not current.id:
            current.id = f"s{len(document.sentences) + 1}"
        if extra:
            current.attrs[_EXTRA_LINES_ATTR] = extra
        document.sentences.append(current)
        current = None
        extra = []

    for lineno, raw_line in enumerate(conllu_text.splitlines(), start=1):
        line = raw_line.rstrip("\r\n")
        if not line.strip():
            _finish()
            continue
        if current is None:
            current = Sentence()
        if line.startswith("#"):
            key_val = line[1:].strip()
            if "=" in key_val:
                key, value = (part.strip() for part in key_val.split("=", 1))
                if key == "sent_id":
                    current.id = value
                elif key == "text":
                    current.text = value
                elif key == "newdoc id":
                    document.id = document.id or value
                elif key in FILE_LEVEL_KEYS and not document.sentences and not current.tokens:
                    document.meta[key] = value
                else:
                    current.attrs[key] = value
            continue
        first_col = line.split("\t", 1)[0]
        if "-" in first_col or "." in first_col:
            extra.append([str(len(current.tokens) + 1), line])
            continue
        current.tokens.append(_parse_token_line(line, lineno))
    _finish()
    return document


def _sentence_lines(sentence: Sentence) -> List[str]:
    lines: List[str] = []
    if sentence.id:
        lines.append(f"# sent_id = {sentence.id}")
    text = sentence.text or " ".join(tok.form for tok in sentence.tokens)
    if text:
        lines.append(f"# text = {text}")
    for key, value in sentence.attrs.items():
        if key == _EXTRA_LINES_ATTR:
            continue
        lines.append(f"# {key} = {value}")

    extra_by_position: Dict[int, List[str]] = {}
    for position, extra_line in sentence.attrs.get(_EXTRA_LINES_ATTR, []):
        extra_by_position.setdefault(int(position), []).append(extra_line)

    for index, token in enumerate(sentence.tokens, start=1):
        lines.extend(extra_by_position.pop(index, []))
        lines.append(_format_token_line(token))
    for remaining in extra_by_position.values():
        lines.extend(remaining)
    return lines


def _format_token_line(token: Token) -> str:
    head_value = "_" if token.head <= 0 else str(token.head)
    return (
        f"{token.id}\t{_escape(token.form)}\t{_escape(token.lemma)}\t"
        f"{_escape(token.upos)}\t{_escape(token.pos)}\t{_escape(token.feats)}\t"
        f"{head_value}\t{_escape(token.deprel)}\t{_escape(token.deps)}\t{_escape(token.misc)}"
    )


def document_to_conllu(document: Document, *, generator: str = DEFAULT_GENERATOR, model: Optional[str] = None) -> str:
    lines: List[str] = []
    model = model or document.meta.get("model")
    if generator:
        lines.append(f"# generator = {generator}")
    if model:
        lines.append(f"# model = {model}")
    if document.id:
        lines.append(f"# newdoc id = {document.id}")
    for sentence in document.sentences:
        lines.extend(_sentence_lines(sentence))
        lines.append("")
    if not document.sentences:
        lines.append("")
    return "\n".join(lines) + "\n"
