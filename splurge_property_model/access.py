"""Scoped widening of member visibility during introspection.

Type descriptors report only public members by default. Enumerating the
non-public members of a type happens inside ``privileged_introspection``,
which widens visibility for the current thread or task and restores it on
exit, including when the enumeration raises.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

_logger = logging.getLogger(__name__)

_privileged: ContextVar[bool] = ContextVar("splurge_property_model_privileged", default=False)


def is_privileged() -> bool:
    """Return True while inside ``privileged_introspection``."""
    return _privileged.get()


@contextmanager
def privileged_introspection(subject: Any = None) -> Iterator[None]:
    """Expose non-public members for the duration of the ``with`` block.

    Args:
        subject: Optional descriptor or type being introspected, used for
            debug logging only.
    """
    token = _privileged.set(True)
    _logger.debug("Privileged introspection opened for %s", subject)
    try:
        yield
    finally:
        _privileged.reset(token)
        _logger.debug("Privileged introspection closed for %s", subject)
