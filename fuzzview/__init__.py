"""Public package surface for fuzzview.

Exports ``main`` for programmatic CLI invocation.
The preview pipeline lives in ``fuzzview.preview`` and the ANSI parser in
``fuzzview.ansi``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
