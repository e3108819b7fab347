"""The extract → generate → reconcile → rewrite pipeline for one source file.

States::

    IDLE → EXTRACTING → GENERATING_BULK ──→ RECONCILING ─┐
                      ↘ GENERATING_SEQUENTIAL ──────────→ REWRITING → DONE

Any exception moves the pipeline to FAILED and is re-raised. In bulk mode a
generation failure is such an exception; in sequential mode it is recorded
per method and the run carries on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from docsync.extract import Extractor, PatternExtractor, extract_file
from docsync.generation.generator import BulkGenerator, SequentialGenerator
from docsync.generation.provider import GenerationProvider
from docsync.generation.reconciler import reconcile
from docsync.models import Method, MethodFailure
from docsync.rewrite.rewriter import OffsetRewriter, Rewriter, write_source

logger = logging.getLogger(__name__)

MODES = ("bulk", "sequential")


class PipelineState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    GENERATING_BULK = "generating_bulk"
    GENERATING_SEQUENTIAL = "generating_sequential"
    RECONCILING = "reconciling"
    REWRITING = "rewriting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineResult:
    path: Path
    methods: list[Method]
    state: PipelineState
    applied: int = 0
    failures: list[MethodFailure] = field(default_factory=list)
    reconciled: bool = False


class AnnotationPipeline:
    """Runs one pass over one file. Create a new instance per run."""

    def __init__(
        self,
        provider: GenerationProvider | None,
        mode: str = "bulk",
        extractor: Extractor | None = None,
        rewriter: Rewriter | None = None,
        sequential: SequentialGenerator | None = None,
        dry_run: bool = False,
    ) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode}")
        if provider is None and not dry_run:
            raise ValueError("A provider is required unless dry_run is set")
        self._provider = provider
        self._mode = mode
        self._extractor = extractor or PatternExtractor()
        self._rewriter = rewriter or OffsetRewriter()
        self._sequential = sequential
        self._dry_run = dry_run
        self.state = PipelineState.IDLE

    def _enter(self, state: PipelineState) -> None:
        logger.debug("Pipeline %s -> %s", self.state.value, state.value)
        self.state = state

    def run(
        self,
        path: Path,
        on_progress: Callable[[dict], None] | None = None,
    ) -> PipelineResult:
        """Annotate every extracted method in ``path`` and rewrite it in place."""
        try:
            return self._run(Path(path), on_progress)
        except Exception:
            self._enter(PipelineState.FAILED)
            raise

    def _run(self, path: Path, on_progress: Callable[[dict], None] | None) -> PipelineResult:
        self._enter(PipelineState.EXTRACTING)
        source, methods = extract_file(path, self._extractor)
        result = PipelineResult(path=path, methods=methods, state=self.state)
        if on_progress:
            on_progress({"step": "extract", "current": len(methods), "total": len(methods)})
        logger.info("Extracted %d method(s) from %s", len(methods), path)

        if not methods or self._dry_run:
            self._enter(PipelineState.DONE)
            result.state = self.state
            return result

        if self._mode == "bulk":
            self._enter(PipelineState.GENERATING_BULK)
            response = BulkGenerator(self._provider).generate(methods, on_progress)
            self._enter(PipelineState.RECONCILING)
            annotations = reconcile(response.segments, len(methods), raw_response=response.raw)
            result.reconciled = len(response.segments) != len(methods)
        else:
            self._enter(PipelineState.GENERATING_SEQUENTIAL)
            generator = self._sequential or SequentialGenerator(self._provider)
            outcome = generator.generate(methods, on_progress)
            annotations = outcome.annotations
            result.failures = outcome.failures

        for method, annotation in zip(methods, annotations):
            method.annotation = annotation

        self._enter(PipelineState.REWRITING)
        updated = self._rewriter.apply(source, methods)
        write_source(path, updated)
        result.applied = len(self._rewriter.applied)
        if on_progress:
            on_progress({"step": "rewrite", "current": result.applied, "total": len(methods)})

        self._enter(PipelineState.DONE)
        result.state = self.state
        return result
