"""Stage tracing and latency timing."""

from __future__ import annotations

import time
from collections.abc import Iterable

from portfolio_studio.types import RetrievalStep


class StageTrace:
    """Append-only record of the pipeline stages a request went through.

    The trace is returned to the UI for display. Pipeline code only appends
    to it and never inspects it to decide what to do next.
    """

    def __init__(self, steps: Iterable[RetrievalStep] = ()) -> None:
        self._steps: list[RetrievalStep] = list(steps)

    def record(self, step: RetrievalStep) -> None:
        self._steps.append(step)

    def as_list(self) -> list[RetrievalStep]:
        return list(self._steps)

    def __len__(self) -> int:
        return len(self._steps)


class Timer:
    """Simple context timer used around generation calls."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
