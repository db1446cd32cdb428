"""
Base Stage Classes

Defines the abstract base class for sanitizer stages and the pipeline
orchestrator. Every stage is a pure str -> str transform wrapped in a small
object so the pipeline can log, time and snapshot it.

Design Principles:
- Single Responsibility: Each stage removes or rewrites one kind of noise
- Order Matters: Later stages assume earlier ones already ran
- Testable: Each stage can be unit tested in isolation, and the pipeline can
  record the text after every stage
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from prompt_sanitizer.logging_config import debug_log


@dataclass
class StageResult:
    """
    Result of a single stage.

    Attributes:
        text: The processed text
        changes_made: Number of changes/substitutions made
        metadata: Additional info about the processing (e.g., dropped lines)
        processing_time_ms: Time taken to process in milliseconds
    """
    text: str
    changes_made: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)
    processing_time_ms: float = 0.0


class BaseStage(ABC):
    """
    Abstract base class for sanitizer stages.

    All stages must implement the `process` method which takes text input
    and returns a StageResult.

    Attributes:
        name: Human-readable name for logging and diagnostic snapshots
        enabled: Whether this stage is active

    Example:
        class TabExpander(BaseStage):
            name = "Tab Expander"

            def process(self, text: str) -> StageResult:
                return StageResult(
                    text=text.replace("\\t", " "),
                    changes_made=text.count("\\t"),
                )
    """

    name: str = "Base Stage"
    enabled: bool = True

    @abstractmethod
    def process(self, text: str) -> StageResult:
        """
        Process the input text and return the transformed version.

        Args:
            text: Output of the previous stage

        Returns:
            StageResult containing the new text and metadata
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(enabled={self.enabled})"


class SanitizationPipeline:
    """
    Runs stages in sequence, each receiving the output of the previous one.

    Disabled stages are skipped. In strict mode (the default) an exception
    raised by a stage is logged and re-raised so the caller can fall back;
    in non-strict mode the stage's input is passed through unchanged and the
    error is recorded in the stats.

    Attributes:
        stages: Ordered list of stage instances
        strict: Re-raise stage errors instead of skipping the stage
        total_changes: Cumulative changes made across all stages

    Example:
        pipeline = SanitizationPipeline([
            InvisibleCharStripper(),
            HtmlDecoder(),
        ])
        cleaned = pipeline.process(raw_text)
        snapshots = pipeline.trace(raw_text)
    """

    def __init__(self, stages: list[BaseStage] | None = None, strict: bool = True):
        self.stages: list[BaseStage] = stages or []
        self.strict = strict
        self.total_changes: int = 0
        self._last_run_stats: dict[str, dict[str, Any]] = {}

    def add_stage(self, stage: BaseStage) -> 'SanitizationPipeline':
        """
        Append a stage to the pipeline.

        Returns:
            Self for method chaining
        """
        self.stages.append(stage)
        return self

    def remove_stage(self, name: str) -> bool:
        """
        Remove a stage by name.

        Returns:
            True if removed, False if not found
        """
        for i, stage in enumerate(self.stages):
            if stage.name == name:
                self.stages.pop(i)
                return True
        return False

    def get_stage(self, name: str) -> BaseStage | None:
        """Return the stage with the given name, or None."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def process(self, text: str) -> str:
        """
        Run all enabled stages on the input text.

        Args:
            text: Raw input text

        Returns:
            Text after the last stage
        """
        return self._run(text, snapshots=None)

    def trace(self, text: str) -> dict[str, str]:
        """
        Run the pipeline and record the text after every enabled stage.

        Returns:
            Ordered mapping: "original" first, then one entry per stage name
        """
        snapshots: dict[str, str] = {"original": text}
        self._run(text, snapshots=snapshots)
        return snapshots

    def _run(self, text: str, snapshots: dict[str, str] | None) -> str:
        self.total_changes = 0
        self._last_run_stats = {}
        if not text:
            return text

        current_text = text
        pipeline_start = time.perf_counter()

        enabled_count = sum(1 for s in self.stages if s.enabled)
        debug_log(f"[PIPELINE] Starting pipeline with {enabled_count} "
                  f"enabled stages on {len(text)} chars")

        for stage in self.stages:
            if not stage.enabled:
                debug_log(f"[PIPELINE] Skipping disabled: {stage.name}")
                continue

            start_time = time.perf_counter()
            try:
                result = stage.process(current_text)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                debug_log(f"[PIPELINE] Error in {stage.name}: {type(e).__name__}: {e}")
                self._last_run_stats[stage.name] = {
                    'error': f"{type(e).__name__}: {e}",
                    'changes': 0,
                    'time_ms': elapsed_ms,
                }
                if self.strict:
                    raise
                if snapshots is not None:
                    snapshots[stage.name] = current_text
                continue

            elapsed_ms = (time.perf_counter() - start_time) * 1000
            result.processing_time_ms = elapsed_ms
            self.total_changes += result.changes_made
            self._last_run_stats[stage.name] = {
                'changes': result.changes_made,
                'time_ms': elapsed_ms,
                'metadata': result.metadata,
            }

            debug_log(f"[PIPELINE] {stage.name}: "
                      f"{result.changes_made} changes in {elapsed_ms:.1f}ms")

            current_text = result.text
            if snapshots is not None:
                snapshots[stage.name] = current_text

        total_time = (time.perf_counter() - pipeline_start) * 1000
        debug_log(f"[PIPELINE] Pipeline complete: {self.total_changes} total changes "
                  f"in {total_time:.1f}ms, output {len(current_text)} chars")

        return current_text

    def get_stats(self) -> dict[str, dict[str, Any]]:
        """
        Get statistics from the last pipeline run.

        Returns:
            Dictionary mapping stage names to their stats
        """
        return self._last_run_stats.copy()

    def __repr__(self) -> str:
        names = [s.name for s in self.stages]
        return f"SanitizationPipeline({names})"
