"""Preview command templating and shell execution."""

from __future__ import annotations

import logging
import os
import re
import subprocess
from dataclasses import dataclass

from ..entry import Entry

logger = logging.getLogger(__name__)

COMMAND_PLACEHOLDER_RE = re.compile(r"\{(\d*)\}")


class PreviewCommandError(ValueError):
    """A preview command template does not fit the entries it is used with.

    This is a channel configuration bug, so it is raised rather than shown as
    a degraded preview.
    """


def format_command(template: str, delimiter: str, entry: Entry) -> str | None:
    """Expand ``{}`` and ``{N}`` placeholders in ``template`` for ``entry``.

    Placeholders are expanded in one pass, so braces inside the entry name
    are never re-read as placeholders.

    Returns ``None`` when the entry name is blank: there is nothing to
    preview. Raises :class:`PreviewCommandError` when ``{N}`` refers to a
    field the entry name does not have.
    """
    if not entry.name.strip():
        return None

    parts = entry.name.split(delimiter) if delimiter else [entry.name]
    logger.debug("command parts for %r: %r", entry.name, parts)

    def substitute(match: re.Match[str]) -> str:
        if not match.group(1):
            return entry.name
        index = int(match.group(1))
        if index < len(parts):
            return parts[index]
        count = index + 1
        raise PreviewCommandError(
            f"entry {entry.name!r} has {len(parts)} part(s) but preview command "
            f"{template!r} requires {count} (delimiter {delimiter!r})"
        )

    return COMMAND_PLACEHOLDER_RE.sub(substitute, template)


def default_shell() -> list[str]:
    if os.name == "nt":
        return ["cmd", "/c"]
    return ["sh", "-c"]


def shell_command(command: str, shell: list[str] | tuple[str, ...] | None = None) -> list[str]:
    """Return argv running ``command`` through the platform shell."""
    prefix = list(shell) if shell else default_shell()
    return [*prefix, command]


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of one preview command run."""

    command: str
    returncode: int | None
    stdout: bytes
    stderr: bytes
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return not self.timed_out and self.returncode == 0


def run_preview_command(
    command: str,
    timeout: float | None = None,
    shell: list[str] | tuple[str, ...] | None = None,
) -> CommandResult:
    """Run ``command`` through the shell, capturing both output streams.

    Launch failures (missing shell, permission errors, NUL bytes in the
    command) are reported as a failed result with the error text on stderr.
    """
    argv = shell_command(command, shell)
    try:
        proc = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        logger.warning("preview command timed out after %ss: %s", timeout, command)
        stderr = exc.stderr or b""
        return CommandResult(
            command=command,
            returncode=None,
            stdout=exc.stdout or b"",
            stderr=stderr + f"timed out after {timeout}s\n".encode(),
            timed_out=True,
        )
    except (OSError, ValueError) as exc:
        # ValueError: argv the OS cannot take, such as an embedded NUL byte.
        logger.warning("could not launch preview command %r: %s", command, exc)
        return CommandResult(command=command, returncode=None, stdout=b"", stderr=str(exc).encode())
    return CommandResult(
        command=command,
        returncode=proc.returncode,
        stdout=proc.stdout,
        stderr=proc.stderr,
    )


__all__ = [
    "COMMAND_PLACEHOLDER_RE",
    "CommandResult",
    "PreviewCommandError",
    "default_shell",
    "format_command",
    "run_preview_command",
    "shell_command",
]
