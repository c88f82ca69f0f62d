"""Non-blocking preview pipeline.

The render loop calls :meth:`Previewer.preview` on every cursor move. Cached
results come back immediately; misses start at most ``max_concurrent``
background jobs and the caller gets the last completed preview (marked stale)
until the fresh one lands in the cache.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from functools import partial

from ..config import PreviewSettings
from ..entry import Entry, PreviewCommand
from .cache import PreviewCache
from .command import CommandResult, PreviewCommandError, format_command, run_preview_command
from .types import AnsiText, Preview

logger = logging.getLogger(__name__)

MAX_CONCURRENT_PREVIEW_TASKS = 3

CommandRunner = Callable[[str], CommandResult]


def preview_cache_key(entry: Entry, command: PreviewCommand) -> str:
    return f"{entry.name}{command.template}"


class Previewer:
    """Owns the preview cache and the bookkeeping for background jobs.

    ``run_command`` executes one formatted command string and defaults to
    running it through the platform shell.
    """

    def __init__(
        self,
        *,
        max_concurrent: int = MAX_CONCURRENT_PREVIEW_TASKS,
        cache: PreviewCache | None = None,
        command_timeout: float | None = None,
        shell: tuple[str, ...] | None = None,
        run_command: CommandRunner | None = None,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        self.max_concurrent = max_concurrent
        self.cache = cache if cache is not None else PreviewCache()
        self._run_command: CommandRunner = run_command or partial(
            run_preview_command,
            timeout=command_timeout,
            shell=shell,
        )
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._in_flight: set[str] = set()
        self._running = 0
        self._last_previewed = Preview().as_stale()
        self._config_error: PreviewCommandError | None = None

    @classmethod
    def from_settings(cls, settings: PreviewSettings, **kwargs) -> Previewer:
        return cls(
            max_concurrent=settings.max_concurrent_previews,
            cache=PreviewCache(settings.preview_cache_size),
            command_timeout=settings.preview_command_timeout,
            shell=settings.shell,
            **kwargs,
        )

    @property
    def running_jobs(self) -> int:
        with self._lock:
            return self._running

    @property
    def last_previewed(self) -> Preview:
        with self._lock:
            return self._last_previewed

    def is_in_flight(self, entry: Entry, command: PreviewCommand) -> bool:
        with self._lock:
            return preview_cache_key(entry, command) in self._in_flight

    def clear_cache(self) -> None:
        self.cache.clear()

    def preview(self, entry: Entry, command: PreviewCommand) -> Preview:
        """Return the best preview available right now without waiting.

        Raises :class:`PreviewCommandError` if a background job found that
        ``command`` does not match the entries it was run against.
        """
        with self._lock:
            error = self._config_error
            self._config_error = None
        if error is not None:
            raise error

        key = preview_cache_key(entry, command)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        logger.debug("preview cache miss for %r", entry.name)

        with self._lock:
            # The job may have landed between the miss above and taking the lock.
            cached = self.cache.get(key)
            if cached is not None:
                return cached
            if key in self._in_flight:
                logger.debug("preview already in flight for %r", entry.name)
                return self._last_previewed
            if self._running >= self.max_concurrent:
                logger.debug("too many concurrent preview tasks running")
                return self._last_previewed
            self._in_flight.add(key)
            self._running += 1
            placeholder = self._last_previewed

        worker = threading.Thread(
            target=self._run_job,
            args=(key, entry, command),
            name="fuzzview-preview",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError:
            self._finish(key)
            raise
        return placeholder

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no background job is running; return ``False`` on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._running == 0, timeout)

    def _run_job(self, key: str, entry: Entry, command: PreviewCommand) -> None:
        try:
            self._compute(key, entry, command)
        except PreviewCommandError as exc:
            logger.error("invalid preview command: %s", exc)
            with self._lock:
                self._config_error = exc
        finally:
            self._finish(key)

    def _compute(self, key: str, entry: Entry, command: PreviewCommand) -> None:
        logger.debug("computing preview for %r", entry.name)
        command_text = format_command(command.template, command.delimiter, entry)
        if command_text is None:
            logger.debug("blank entry, skipping preview command")
            return
        logger.debug("formatted preview command: %r", command_text)

        result = self._run_command(command_text)
        if result.ok:
            preview = Preview(
                title=entry.name,
                content=AnsiText.from_output(result.stdout),
                icon=entry.icon,
            )
            self.cache.insert(key, preview)
            with self._lock:
                self._last_previewed = preview.as_stale()
            return

        stderr = result.stderr.decode("utf-8", errors="replace")
        logger.debug("preview command failed (%s): %r", result.returncode, command_text)
        preview = Preview(
            title=entry.name,
            content=AnsiText.from_output(f"error running command: {command_text}\n{stderr}"),
            icon=entry.icon,
        )
        self.cache.insert(key, preview)

    def _finish(self, key: str) -> None:
        with self._idle:
            self._in_flight.discard(key)
            if self._running > 0:
                self._running -= 1
            else:
                logger.error("preview task counter underflow for %r", key)
            self._idle.notify_all()


__all__ = [
    "MAX_CONCURRENT_PREVIEW_TASKS",
    "CommandRunner",
    "Previewer",
    "preview_cache_key",
]
