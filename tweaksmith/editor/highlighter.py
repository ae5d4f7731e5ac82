"""
Highlighting scheduler.

Small buffers are tokenized inline. Buffers at or above ``INLINE_LINE_LIMIT``
logical lines are tokenized on a single background worker so edits stay
responsive. Every submission bumps a generation counter; a result is applied
only if its generation is still the newest, so a slow pass can never overwrite
the highlighting of a newer buffer (last write wins).

Cancellation is soft: a pass that has already started runs to completion and
its result is simply dropped.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from typing import Callable, Optional

from tweaksmith.editor.tokenizer import HighlightResult, highlight_code, split_lines

logger = logging.getLogger(__name__)

INLINE_LINE_LIMIT = 200

HighlightFn = Callable[[str], HighlightResult]
UpdateCallback = Callable[[HighlightResult], None]


class Highlighter:
    """
    Keeps the token rows for the most recently submitted buffer.

    Thread-safe: ``submit`` is called from the foreground, passes finish on
    the worker thread, and both go through ``_lock``.
    """

    def __init__(
        self,
        inline_line_limit: int = INLINE_LINE_LIMIT,
        highlight: HighlightFn = highlight_code,
        on_update: Optional[UpdateCallback] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        """
        Args:
            inline_line_limit: Buffers with fewer lines are tokenized inline.
            highlight: Tokenizing function (swappable for tests).
            on_update: Called with each result that gets applied.
            executor: Worker pool to use; one single-thread pool is created
                lazily when omitted.
        """
        self.inline_line_limit = inline_line_limit
        self._highlight = highlight
        self._on_update = on_update
        self._executor = executor
        self._owns_executor = executor is None
        self._lock = threading.Lock()
        self._generation = 0
        self._applied_generation = 0
        self._pending: Optional[Future] = None
        self._result: HighlightResult = highlight_code("")

    @property
    def result(self) -> HighlightResult:
        """The last applied result."""
        with self._lock:
            return self._result

    @property
    def is_pending(self) -> bool:
        """True while the newest submission has not been applied yet."""
        with self._lock:
            return self._applied_generation != self._generation

    def submit(self, text: str) -> Optional[Future]:
        """Schedule highlighting of ``text``.

        Returns:
            The background future for deferred passes, None when the buffer
            was highlighted inline.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None

        if len(split_lines(text)) < self.inline_line_limit:
            self._run(generation, text)
            return None

        future = self._get_executor().submit(self._run, generation, text)
        with self._lock:
            if generation == self._generation:
                self._pending = future
        return future

    def wait(self, timeout: Optional[float] = None) -> HighlightResult:
        """Block until the newest deferred pass (if any) has been applied."""
        with self._lock:
            pending = self._pending
        if pending is not None:
            wait_futures([pending], timeout=timeout)
        return self.result

    def close(self) -> None:
        """Stop the worker pool if this highlighter created it."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "Highlighter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="tweaksmith-highlight"
            )
        return self._executor

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _run(self, generation: int, text: str) -> Optional[HighlightResult]:
        if not self._is_current(generation):
            logger.debug("Skipping superseded highlight pass %d", generation)
            return None

        try:
            result = self._highlight(text)
        except Exception as exc:
            logger.warning("Highlighting failed, retokenizing inline: %s", exc)
            result = highlight_code(text)

        if not self._apply(generation, result):
            return None
        return result

    def _apply(self, generation: int, result: HighlightResult) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.debug(
                    "Discarding stale highlight pass %d (newest is %d)",
                    generation, self._generation,
                )
                return False
            self._result = result
            self._applied_generation = generation
            if self._pending is not None and self._pending.done():
                self._pending = None

        if self._on_update is not None:
            self._on_update(result)
        return True
