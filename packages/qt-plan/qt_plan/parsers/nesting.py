"""Flat-list-to-tree nesting shared by the indented and tabular parsers."""

from __future__ import annotations

from typing import Callable, Iterable, List, Tuple, TypeVar

from ..schemas import PlanNode

T = TypeVar("T")


def nest_by_level(
    entries: Iterable[Tuple[int, T]],
    add_child: Callable[[T, T], None],
) -> List[T]:
    """Nest ``(level, payload)`` pairs into a forest.

    Keeps a stack of the last payload seen at each open level. For every new
    entry, entries at the same or a deeper level are popped; the entry is then
    attached to the new stack top, or becomes a root when the stack is empty.

    Args:
        entries: Pairs in document order.
        add_child: Called as ``add_child(parent, child)``.

    Returns:
        Root payloads in document order.
    """
    roots: List[T] = []
    stack: List[Tuple[int, T]] = []
    for level, payload in entries:
        while stack and stack[-1][0] >= level:
            stack.pop()
        if stack:
            add_child(stack[-1][1], payload)
        else:
            roots.append(payload)
        stack.append((level, payload))
    return roots


def attach_child(parent: PlanNode, child: PlanNode) -> None:
    parent.children.append(child)


def nest_nodes(nodes: Iterable[PlanNode]) -> List[PlanNode]:
    """Nest level-tagged PlanNodes, then make levels match tree depth."""
    roots = nest_by_level(((node.level, node) for node in nodes), attach_child)
    relevel(roots)
    return roots


def relevel(roots: List[PlanNode], level: int = 0) -> None:
    """Set every node's level to its depth (roots = 0).

    Indentation may jump by more than one step; nesting already tolerates
    that, and this keeps ``child.level == parent.level + 1``.
    """
    for node in roots:
        node.level = level
        relevel(node.children, level + 1)
