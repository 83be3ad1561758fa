"""Checklist dependency queries.

Dependencies are declared on checklist items but never gate completion.
These helpers only report the state so the UI can show what an item waits on.
"""

from __future__ import annotations

from collections.abc import Sequence

from terangabuild.models import ChecklistItem


def unmet_dependencies(item: ChecklistItem, items: Sequence[ChecklistItem]) -> list[str]:
    """IDs of declared prerequisites of ``item`` that are not yet completed.

    Dependencies pointing at items that no longer exist are ignored.
    """
    by_id = {other.id: other for other in items}
    return [
        dep_id
        for dep_id in item.dependencies
        if dep_id in by_id and not by_id[dep_id].is_completed
    ]


def can_complete(item: ChecklistItem, items: Sequence[ChecklistItem]) -> bool:
    return not unmet_dependencies(item, items)


def find_dependency_cycle(items: Sequence[ChecklistItem]) -> list[str] | None:
    """Return one dependency cycle as a list of IDs, or None if the graph is acyclic."""
    edges = {item.id: [dep for dep in item.dependencies if dep != item.id] for item in items}
    self_loops = [item.id for item in items if item.id in item.dependencies]
    if self_loops:
        return [self_loops[0], self_loops[0]]

    visiting: set[str] = set()
    done: set[str] = set()
    path: list[str] = []

    def visit(node: str) -> list[str] | None:
        visiting.add(node)
        path.append(node)
        for dep in edges.get(node, ()):
            if dep not in edges:
                continue
            if dep in visiting:
                return path[path.index(dep):] + [dep]
            if dep not in done:
                cycle = visit(dep)
                if cycle:
                    return cycle
        visiting.discard(node)
        done.add(node)
        path.pop()
        return None

    for node in edges:
        if node not in done:
            cycle = visit(node)
            if cycle:
                return cycle
    return None
