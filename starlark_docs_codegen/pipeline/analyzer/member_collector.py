"""
Member type collector.

Finds every struct type reachable from the Spec fields of the generation
targets. Each one gets a class stub, and class stubs are all emitted
before the first function so that annotations never name a class that
has not been declared yet.
"""

from __future__ import annotations

from ...logging import get_logger
from ..type_ast import TypeDescriptor, TypeKind
from .classifier import is_time_member
from .targets import require_spec_member_type

logger = get_logger("member_collector")


class MemberCollector:
    """Collects distinct member struct types in first-encounter order."""

    def __init__(self, time_types: list[str] | set[str]):
        self.time_types = set(time_types)
        self._seen: set[int] = set()
        self._members: list[TypeDescriptor] = []

    def collect(self, targets: list[TypeDescriptor]) -> list[TypeDescriptor]:
        """
        Collect member types for the given targets.

        Args:
            targets: Generation targets, already sorted by name

        Returns:
            Struct types in the order they were first reached

        Raises:
            MissingSpecError: If a target has no Spec field
        """
        self._seen = set()
        self._members = []
        for target in targets:
            spec = require_spec_member_type(target)
            self._walk_fields(spec)
        logger.debug("Collected %d member types", len(self._members))
        return self._members

    def _walk_fields(self, t: TypeDescriptor) -> None:
        for member in t.members:
            if is_time_member(member, self.time_types):
                continue
            self._visit(member.type)

    def _visit(self, t: TypeDescriptor | None) -> None:
        while t is not None and t.kind in (TypeKind.POINTER, TypeKind.SLICE):
            t = t.elem
        if t is None or t.kind != TypeKind.STRUCT or id(t) in self._seen:
            return
        # Record before descending so recursive types terminate
        self._seen.add(id(t))
        self._members.append(t)
        self._walk_fields(t)


def collect_members(targets: list[TypeDescriptor], time_types: list[str] | set[str]) -> list[TypeDescriptor]:
    """Convenience wrapper around MemberCollector.collect."""
    return MemberCollector(time_types).collect(targets)
