"""
Exposes the version of geodist
"""
from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

_DIST_NAME = 'geodist'


def _resolve_version() -> str | None:
    """
    Prefer installed package metadata; when running from a source checkout fall back
    to the repo-root VERSION file that setup.py also reads.
    """
    try:
        return version(_DIST_NAME)
    except PackageNotFoundError:
        pass

    version_file = Path(__file__).resolve().parents[1] / 'VERSION'
    try:
        return version_file.read_text(encoding='utf-8').strip()
    except OSError:
        return None


__version__ = _resolve_version()

__all__ = ['__version__']
