"""A prefix tree storing a set of string paths."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["Trie"]


@dataclass
class _TrieNode:
    path: str = ""
    is_end: bool = False
    children: dict[str, "_TrieNode"] = field(default_factory=dict)


class Trie:
    """Set of strings organised by shared prefixes."""

    def __init__(self) -> None:
        self._head = _TrieNode()

    def insert(self, path: str) -> None:
        """Add ``path`` to the trie."""
        node = self._head
        for index, char in enumerate(path, start=1):
            child = node.children.get(char)
            if child is None:
                child = _TrieNode(path[:index])
                node.children[char] = child
            node = child
        node.is_end = True

    def _locate(self, path: str) -> _TrieNode | None:
        node = self._head
        for char in path:
            node = node.children.get(char)
            if node is None:
                return None
        return node

    def find(self, path: str) -> bool:
        """Return True if ``path`` was inserted and not erased."""
        node = self._locate(path)
        return node is not None and node.is_end

    def clear(self) -> None:
        """Remove every stored path."""
        self._head = _TrieNode()

    def erase(self, path: str) -> None:
        """Remove ``path``; other paths sharing its prefix are kept."""
        node = self._locate(path)
        if node is not None and node.path == path and node.is_end:
            node.is_end = False