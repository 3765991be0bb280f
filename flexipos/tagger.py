"""
Sentence-level POS tagging.

``SentenceTagger`` sends the words of each sentence to a tagging backend,
maps the returned tags through an optional :class:`~flexipos.tag_mapping.TagMapper`
and writes them into words that do not have a POS yet.
"""

from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .backend_spec import BackendLike
from .doc import Document, Token
from .errors import AlignmentError, UnresolvedMappingWarning
from .tag_mapping import TagMapper

logger = logging.getLogger(__name__)

PADDING_TOKEN = "."

# Annotation level consumed / produced by this stage.
INPUT_TYPE = "WORDS"
OUTPUT_TYPE = "PARTSOFSPEECH"


class SerializedTagger:
    """Lock-guarded access to a backend that is not reentrant.

    Every wrapper built by :meth:`for_backend` for the same backend object
    shares one lock. The lock registry holds backends weakly, so dropping the
    last reference to a backend also frees its lock.
    """

    _locks: "weakref.WeakKeyDictionary[object, threading.Lock]" = weakref.WeakKeyDictionary()
    _locks_lock = threading.Lock()

    def __init__(self, backend: BackendLike, lock: Optional[threading.Lock] = None) -> None:
        self._backend = backend
        self._tag = backend.tag if hasattr(backend, "tag") else backend
        self._lock = lock if lock is not None else threading.Lock()
        self.calls = 0

    @classmethod
    def for_backend(cls, backend: BackendLike) -> "SerializedTagger":
        if isinstance(backend, SerializedTagger):
            return backend
        return cls(backend, cls._shared_lock(backend))

    @classmethod
    def _shared_lock(cls, backend: BackendLike) -> threading.Lock:
        # bound methods are recreated on every attribute access; key on the owner
        owner = getattr(backend, "__self__", None)
        if owner is None:
            owner = backend
        with cls._locks_lock:
            try:
                lock = cls._locks.get(owner)
                if lock is None:
                    lock = threading.Lock()
                    cls._locks[owner] = lock
            except TypeError:
                # not weak-referenceable or unhashable: the lock is private to this caller
                logger.debug("Cannot share a lock for backend %r", owner)
                lock = threading.Lock()
            return lock

    @property
    def backend(self) -> BackendLike:
        return self._backend

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    def tag(self, tokens: Sequence[str]) -> List[str]:
        with self._lock:
            self.calls += 1
            tags = self._tag(list(tokens))
        return [] if tags is None else list(tags)


@dataclass
class SentenceOutcome:
    tokens: List[str]
    tags: List[str]
    padded: bool = False
    written: int = 0
    preserved: int = 0
    warnings: List[UnresolvedMappingWarning] = field(default_factory=list)


@dataclass
class TaggingResult:
    """Result of tagging one document."""

    document: Document
    stats: Dict[str, int] = field(default_factory=dict)
    warnings: List[UnresolvedMappingWarning] = field(default_factory=list)


class SentenceTagger:
    input_type = INPUT_TYPE
    output_type = OUTPUT_TYPE

    def __init__(
        self,
        backend: BackendLike,
        mapper: Optional[TagMapper] = None,
        *,
        padding_token: str = PADDING_TOKEN,
        respect_existing: bool = True,
    ) -> None:
        if not padding_token:
            raise ValueError("padding_token must be a non-empty string")
        self._tagger = SerializedTagger.for_backend(backend)
        self.mapper = mapper if mapper is not None else TagMapper.disabled()
        self.padding_token = padding_token
        self.respect_existing = respect_existing

    @property
    def backend(self) -> BackendLike:
        return self._tagger.backend

    def tag_document(self, document: Document) -> Document:
        """Tag ``document`` in place and return it."""
        return self.tag(document).document

    def tag(self, document: Document) -> TaggingResult:
        result = TaggingResult(
            document=document,
            stats={"sentences": 0, "tokens": 0, "written": 0, "preserved": 0, "padded": 0, "unmapped": 0},
        )
        for idx in range(len(document.sentences)):
            outcome = self.tag_sentence(document.words(idx), sentence_index=idx)
            result.stats["sentences"] += 1
            result.stats["tokens"] += len(outcome.tokens)
            result.stats["written"] += outcome.written
            result.stats["preserved"] += outcome.preserved
            result.stats["padded"] += int(outcome.padded)
            result.stats["unmapped"] += len(outcome.warnings)
            result.warnings.extend(outcome.warnings)

        logger.debug(
            "Tagged document id=%s sentences=%d tokens=%d written=%d preserved=%d unmapped=%d",
            document.id or "<unnamed>",
            result.stats["sentences"],
            result.stats["tokens"],
            result.stats["written"],
            result.stats["preserved"],
            result.stats["unmapped"],
        )
        return result

    def tag_sentence(self, words: Sequence[Token], *, sentence_index: Optional[int] = None) -> SentenceOutcome:
        tokens = [word.form for word in words]
        outcome = SentenceOutcome(tokens=tokens, tags=[])
        if not tokens:
            return outcome

        request = list(tokens)
        # single-token input is unstable for most sequence taggers
        if len(request) == 1:
            request.append(self.padding_token)
            outcome.padded = True

        tags = self._tagger.tag(request)
        self._check_alignment(request, tags, sentence_index)
        outcome.tags = tags[: len(tokens)]

        for position, (word, tag) in enumerate(zip(words, outcome.tags)):
            if word.pos and self.respect_existing:
                outcome.preserved += 1
                continue
            resolution = self.mapper.resolve(tag)
            if resolution.unresolved:
                warning = UnresolvedMappingWarning(tag, sentence_index=sentence_index, token_index=position)
                logger.warning("%s", warning)
                outcome.warnings.append(warning)
            word.pos = resolution.value_or(tag)
            outcome.written += 1
        return outcome

    @staticmethod
    def _check_alignment(request: List[str], tags: List[object], sentence_index: Optional[int]) -> None:
        where = f"sentence {sentence_index}" if sentence_index is not None else "sentence"
        if len(tags) != len(request):
            raise AlignmentError(
                f"Tagger returned {len(tags)} tags for {len(request)} tokens in {where}",
                sentence_index=sentence_index,
                tokens=request,
                tags=tags,
            )
        bad = [tag for tag in tags if not isinstance(tag, str) or not tag]
        if bad:
            raise AlignmentError(
                f"Tagger returned invalid tags {bad!r} in {where}",
                sentence_index=sentence_index,
                tokens=request,
                tags=tags,
            )
