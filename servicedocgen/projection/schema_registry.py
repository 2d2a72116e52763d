"""Schema Registry - run-scoped ledger of emitted and pending component schemas."""

import logging
from typing import Dict, List, Optional, Set

from ..introspection.type_descriptor import TypeDescriptor

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """
    Tracks which component schemas were rendered and which are queued

    Schemas are keyed by the simple class name. A name is rendered at most
    once and is never queued again after it was rendered or queued.
    """

    def __init__(self):
        self._rendered: Set[str] = set()
        self._pending: Dict[str, TypeDescriptor] = {}

    def is_rendered(self, name: str) -> bool:
        return name in self._rendered

    def is_pending(self, name: str) -> bool:
        return name in self._pending

    def enqueue(self, descriptor: TypeDescriptor) -> bool:
        """
        Queue a type for rendering

        Returns:
            True if the type was queued, False if already rendered or queued
        """
        name = descriptor.simple_name
        if name in self._rendered or name in self._pending:
            return False
        self._pending[name] = descriptor
        return True

    def mark_rendered(self, name: str) -> None:
        self._rendered.add(name)
        self._pending.pop(name, None)

    def take(self, name: str) -> Optional[TypeDescriptor]:
        """Remove a queued type, returning it (None if not queued)"""
        return self._pending.pop(name, None)

    def pending_names(self) -> List[str]:
        return list(self._pending)
