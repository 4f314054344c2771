"""Comment tree model and per-node collapse state."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional

from src.core.types import CommentNode


def normalize_replies(value: Any) -> list:
    """Return a reply list that callers can always iterate.

    Absent (``None``) replies become an empty list. Anything else is returned
    as a list in its original order.
    """
    if value is None:
        return []
    return list(value)


class CommentTree:
    """Top-level comments of a post, exactly as the API returned them.

    No flattening, sorting or re-parenting happens here. Traversal is
    iterative so arbitrarily deep threads do not hit the recursion limit.
    """

    def __init__(self, roots: Iterable[CommentNode] = ()):
        self._roots: tuple[CommentNode, ...] = tuple(roots)

    @property
    def roots(self) -> tuple[CommentNode, ...]:
        return self._roots

    def __len__(self) -> int:
        return len(self._roots)

    def __iter__(self) -> Iterator[CommentNode]:
        return iter(self._roots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommentTree):
            return NotImplemented
        return self._roots == other._roots

    def __hash__(self) -> int:
        return hash(self._roots)

    def __repr__(self) -> str:
        return f"CommentTree(roots={len(self._roots)}, total={self.total_count()})"

    def walk(self, skip_children_of: Optional[set[str]] = None) -> Iterator[tuple[CommentNode, int]]:
        """Yield ``(node, depth)`` pairs in pre-order.

        Args:
            skip_children_of: Node ids whose replies should not be descended into.
                The node itself is still yielded.
        """
        skip = skip_children_of or set()
        stack: list[tuple[CommentNode, int]] = [(node, 0) for node in reversed(self._roots)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            if node.id in skip:
                continue
            for reply in reversed(node.replies):
                stack.append((reply, depth + 1))

    def find(self, comment_id: str) -> Optional[CommentNode]:
        for node, _depth in self.walk():
            if node.id == comment_id:
                return node
        return None

    def total_count(self) -> int:
        """Number of comments at every depth."""
        return sum(1 for _ in self.walk())


class CollapseState:
    """Collapsed/expanded flags for one rendered comment tree.

    Every node starts expanded. Collapsing a node hides its whole subtree
    from ``visible()`` without touching the tree itself, so expanding it again
    restores the nested flags the subtree had before.
    """

    def __init__(self):
        self._collapsed: set[str] = set()

    def toggle(self, comment_id: str) -> bool:
        """Flip a node's flag. Returns the new collapsed value."""
        if comment_id in self._collapsed:
            self._collapsed.discard(comment_id)
            return False
        self._collapsed.add(comment_id)
        return True

    def is_collapsed(self, comment_id: str) -> bool:
        return comment_id in self._collapsed

    def visible(self, tree: CommentTree) -> Iterator[tuple[CommentNode, int]]:
        """Nodes to render, with their depth, honouring collapsed subtrees."""
        return tree.walk(skip_children_of=self._collapsed)

    def reset(self) -> None:
        """Expand everything; called when a freshly fetched tree is shown."""
        self._collapsed.clear()

    @property
    def collapsed_ids(self) -> frozenset[str]:
        return frozenset(self._collapsed)
