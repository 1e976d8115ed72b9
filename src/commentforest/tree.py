"""Tree assembly: rebuild a comment forest from flat parent-id records."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any, TypeVar

from commentforest.models import CommentNode

logger = logging.getLogger(__name__)

ORPHAN_MARKER = "[Reply to unavailable comment]"

T = TypeVar("T")
R = TypeVar("R")

_DONE: Any = object()  # sentinel for an exhausted child iterator


def assemble_comments(nodes: Sequence[CommentNode]) -> list[CommentNode]:
    """Link flat comment records into a forest and return its roots.

    Every record ends up in the result exactly once. A record whose
    ``parent_id`` is empty is a root. A record whose ``parent_id`` is its own
    id, or names no record in *nodes*, is promoted to root as an orphan and
    its content is prefixed with :data:`ORPHAN_MARKER`. Children keep the
    relative order in which they were supplied, and so do the roots.

    Parents may appear before or after their children in *nodes*. Duplicate
    ids are tolerated: the last record with an id receives the replies
    addressed to it, and earlier ones are kept as-is. Parent links that form
    a loop are cut at the loop member supplied first, which becomes an
    orphan root carrying the rest of the loop beneath it.

    The input records are not modified; fresh nodes are returned. Children
    already attached to an input record are ignored.
    """
    index: dict[str, int] = {}
    for pos, node in enumerate(nodes):
        if node.id in index:
            logger.warning(
                "Duplicate comment id %r at positions %d and %d; replies attach to the later one",
                node.id,
                index[node.id],
                pos,
            )
        index[node.id] = pos

    # ── 1. Resolve each record to a parent position (None → root) ─────
    parents: list[int | None] = []
    orphaned: list[bool] = []
    for node in nodes:
        parent_id = node.parent_id
        if not parent_id:
            parents.append(None)
            orphaned.append(False)
        elif parent_id == node.id or parent_id not in index:
            logger.debug("Orphaned comment %r (parent %r unavailable)", node.id, parent_id)
            parents.append(None)
            orphaned.append(True)
        else:
            parents.append(index[parent_id])
            orphaned.append(False)

    # ── 2. Cut parent loops so every record stays reachable ───────────
    _break_cycles(nodes, parents, orphaned)

    # ── 3. Build fresh nodes, then link in input order ────────────────
    built: list[CommentNode] = []
    for node, is_orphan in zip(nodes, orphaned):
        update: dict[str, object] = {"children": []}
        if node.metadata is not None:
            update["metadata"] = dict(node.metadata)
        if is_orphan:
            update["content"] = f"{ORPHAN_MARKER} {node.content}"
        built.append(node.model_copy(update=update))

    roots: list[CommentNode] = []
    for pos, node in enumerate(built):
        parent_pos = parents[pos]
        if parent_pos is None:
            roots.append(node)
        else:
            built[parent_pos].children.append(node)

    logger.debug("Assembled %d comments into %d roots", len(built), len(roots))
    return roots


def _break_cycles(
    nodes: Sequence[CommentNode],
    parents: list[int | None],
    orphaned: list[bool],
) -> None:
    """Detach one member of every parent loop, in place.

    Each record has at most one parent, so following parent links from any
    record either reaches a root or enters a loop. Walks are iterative and
    every record is visited once.
    """
    unvisited, on_path, done = 0, 1, 2
    state = [unvisited] * len(parents)

    for start in range(len(parents)):
        if state[start] != unvisited:
            continue

        path: list[int] = []
        pos: int | None = start
        while pos is not None and state[pos] == unvisited:
            state[pos] = on_path
            path.append(pos)
            pos = parents[pos]

        if pos is not None and state[pos] == on_path:
            loop = path[path.index(pos):]
            head = min(loop)
            logger.warning(
                "Parent loop among comments %s; promoting %r to root",
                [nodes[p].id for p in sorted(loop)],
                nodes[head].id,
            )
            parents[head] = None
            orphaned[head] = True

        for p in path:
            state[p] = done


def count_comments(nodes: Sequence[CommentNode]) -> int:
    """Return the number of nodes in the forest rooted at *nodes*."""
    total = 0
    stack = list(nodes)
    while stack:
        node = stack.pop()
        total += 1
        stack.extend(node.children)
    return total


def level_counts(nodes: Sequence[CommentNode]) -> list[int]:
    """Return the node count at each depth, roots first.

    An empty forest yields an empty list.
    """
    counts: list[int] = []
    level = list(nodes)
    while level:
        counts.append(len(level))
        level = [child for node in level for child in node.children]
    return counts


def fold_forest(
    roots: Iterable[T],
    children_of: Callable[[T], Iterable[T]],
    build: Callable[[T, list[R]], R],
) -> list[R]:
    """Build one result per node, children before their parent.

    ``build(node, child_results)`` receives the results for the node's
    children in order. The walk uses an explicit stack, so reply depth is
    not bounded by the interpreter's recursion limit. *children_of* is
    consumed lazily, one child at a time, in depth-first order.
    """
    results: list[R] = []
    for root in roots:
        stack: list[tuple[T, Iterator[T], list[R], list[R]]] = [
            (root, iter(children_of(root)), [], results)
        ]
        while stack:
            node, pending, built, sink = stack[-1]
            child = next(pending, _DONE)
            if child is not _DONE:
                stack.append((child, iter(children_of(child)), [], built))
                continue
            stack.pop()
            sink.append(build(node, built))
    return results

