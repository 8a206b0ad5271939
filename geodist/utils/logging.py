"""Logging utility for geodist"""

__all__ = ['LOGGER', 'reset_warnings', 'warn_once']

import logging

LOGGER = logging.getLogger('geodist')
LOGGER.setLevel(logging.WARNING)
_LOG_HANDLER = logging.StreamHandler()
_LOG_FORMATTER = logging.Formatter('[%(levelname)s] %(name)s: %(message)s')
_LOG_HANDLER.setFormatter(_LOG_FORMATTER)
LOGGER.addHandler(_LOG_HANDLER)

_WARNINGS = set()


def warn_once(warning: str, *args):
    """
    Log a warning the first time a given message template is seen.

    Deduplication is keyed on the unformatted template, so e.g. an accuracy
    warning for two different flattenings is only emitted once.
    """
    if warning not in _WARNINGS:
        LOGGER.warning(warning, *args)
        _WARNINGS.add(warning)


def reset_warnings():
    """Forget which warnings have been emitted (mostly useful in tests)"""
    _WARNINGS.clear()
