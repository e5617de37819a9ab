"""Monthly invoice duplication job package.

Duplicates the configured Misoca invoice once per scheduled run.
"""

from __future__ import annotations

from typing import Any


def __getattr__(name: str) -> Any:
    if name in {"main", "run_job"}:
        from . import handler

        return getattr(handler, name)
    raise AttributeError(name)


__all__ = ["main", "run_job"]
