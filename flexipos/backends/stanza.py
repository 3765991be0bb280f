"""Stanza backend using the pretokenized pipeline mode."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..backend_spec import BackendSpec
from ..errors import ConfigurationError


class StanzaBackend:
    def __init__(
        self,
        language: str = "en",
        *,
        package: str = "default",
        model_dir: Optional[str] = None,
        attribute: str = "xpos",
        use_gpu: bool = False,
        download_model: bool = False,
    ):
        import stanza

        if attribute not in {"xpos", "upos"}:
            raise ConfigurationError(f"Unsupported stanza attribute '{attribute}' (use 'xpos' or 'upos')")
        logging.getLogger("stanza").setLevel(logging.WARNING)
        kwargs = dict(
            lang=language,
            package=package,
            processors="tokenize,pos",
            tokenize_pretokenized=True,
            use_gpu=use_gpu,
            verbose=False,
        )
        if model_dir:
            kwargs["dir"] = str(Path(model_dir))
        if download_model:
            download_kwargs = {"model_dir": kwargs["dir"]} if "dir" in kwargs else {}
            stanza.download(language, package=package, processors="tokenize,pos", **download_kwargs)
        try:
            self._pipeline = stanza.Pipeline(**kwargs)
        except Exception as exc:
            raise ConfigurationError(
                f"Cannot load stanza pipeline for '{language}': {exc}. "
                "Pass download_model=True or run stanza.download() first."
            ) from exc
        self.attribute = attribute

    def tag(self, tokens: Sequence[str]) -> List[str]:
        doc = self._pipeline([list(tokens)])
        return [getattr(word, self.attribute) or "" for sentence in doc.sentences for word in sentence.words]


def _create_stanza_backend(
    *,
    model: Optional[str] = None,
    language: Optional[str] = None,
    package: str = "default",
    model_dir: Optional[str] = None,
    attribute: str = "xpos",
    use_gpu: bool = False,
    download_model: bool = False,
):
    return StanzaBackend(
        language or model or "en",
        package=package,
        model_dir=model_dir,
        attribute=attribute,
        use_gpu=use_gpu,
        download_model=download_model,
    )


BACKEND_SPEC = BackendSpec(
    name="stanza",
    description="Stanford Stanza POS tagger (pretokenized mode)",
    factory=_create_stanza_backend,
    requires="stanza",
    install_hint='pip install "flexipos[stanza]"',
    url="https://stanfordnlp.github.io/stanza/",
)
