"""Interface closure of a type.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

from collections import deque

from .descriptors.base import TypeDescriptor


def collect_interfaces(descriptor: TypeDescriptor) -> list[TypeDescriptor]:
    """Return every interface ``descriptor`` implements, nearest first.

    The type's direct interfaces come first, followed breadth-first by the
    interfaces they extend. Then the same closure is added for each
    supertype in turn, nearest supertype first. Each interface is reported
    once, at its nearest position.
    """
    result: list[TypeDescriptor] = []
    seen: set[object] = set()
    current: TypeDescriptor | None = descriptor
    while current is not None:
        queue: deque[TypeDescriptor] = deque(current.interfaces)
        while queue:
            interface = queue.popleft()
            if interface.key in seen:
                continue
            seen.add(interface.key)
            result.append(interface)
            queue.extend(interface.interfaces)
        current = current.supertype
    return result
