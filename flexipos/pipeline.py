from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .doc import Document
from .errors import AlignmentError
from .tagger import SentenceTagger, TaggingResult

logger = logging.getLogger(__name__)


@dataclass
class DocumentOutcome:
    document: Document
    result: Optional[TaggingResult] = None
    error: Optional[AlignmentError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def stats(self) -> Dict[str, int]:
        return self.result.stats if self.result else {}


@dataclass
class PipelineSummary:
    outcomes: List[DocumentOutcome] = field(default_factory=list)

    @property
    def failed(self) -> List[DocumentOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    def totals(self) -> Dict[str, int]:
        totals: Dict[str, int] = {"documents": len(self.outcomes), "failed": len(self.failed)}
        for outcome in self.outcomes:
            for key, value in outcome.stats.items():
                totals[key] = totals.get(key, 0) + value
        return totals


class TaggingPipeline:
    """Tag many documents with one shared SentenceTagger.

    Documents are prepared and post-processed in parallel; the calls into the
    backend are serialized by the tagger. An alignment failure aborts only the
    document it occurred in.
    """

    def __init__(self, tagger: SentenceTagger, *, max_workers: int = 1) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.tagger = tagger
        self.max_workers = max_workers

    def process(self, document: Document) -> DocumentOutcome:
        try:
            result = self.tagger.tag(document)
        except AlignmentError as exc:
            logger.error("Tagging aborted for document %s: %s", document.id or "<unnamed>", exc)
            return DocumentOutcome(document=document, error=exc)
        return DocumentOutcome(document=document, result=result)

    def process_many(self, documents: Iterable[Document], *, max_workers: Optional[int] = None) -> PipelineSummary:
        docs = list(documents)
        workers = max_workers or self.max_workers
        if workers <= 1 or len(docs) <= 1:
            return PipelineSummary(outcomes=[self.process(doc) for doc in docs])
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="flexipos") as executor:
            outcomes = list(executor.map(self.process, docs))
        return PipelineSummary(outcomes=outcomes)
