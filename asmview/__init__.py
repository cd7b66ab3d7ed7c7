"""Public package surface for asmview.

Exports ``main`` for programmatic CLI invocation.
The interpretation pipeline lives in ``asmview.output``, ``asmview.listing``,
``asmview.symbols`` and ``asmview.search``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
