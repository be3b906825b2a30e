"""Public package surface for lazypager.

Exports ``main`` for programmatic CLI invocation.
Most implementation lives in submodules under ``lazypager``.
"""

from __future__ import annotations

import logging

# The pager owns the terminal; records only go somewhere when --debug-log is given.
logging.getLogger(__name__).addHandler(logging.NullHandler())


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
