"""RoadNameIndex - prefix search over road names.

A character trie maps every road name to the roads carrying it. A query
returns all roads whose name starts with the query. When some road names
match the query exactly, only those exact matches are returned: a search
for "queen street" should not also highlight "queen street east".

Matching is case-insensitive; names keep their original spelling.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from roadmap_viewer.model.road import Road

logger = logging.getLogger(__name__)


@dataclass
class _TrieNode:
    children: dict[str, "_TrieNode"] = field(default_factory=dict)
    roads: list[Road] = field(default_factory=list)


class RoadNameIndex:
    """Trie of road names.

    Example:
        index = RoadNameIndex(roads=graph.roads.values())
        roads = index.search(query="queen")
    """

    def __init__(self, roads: Iterable[Road] = ()) -> None:
        self._root = _TrieNode()
        self._size = 0
        for road in roads:
            self.add(road=road)

    def __len__(self) -> int:
        return self._size

    @staticmethod
    def _normalise(text: str) -> str:
        return text.strip().lower()

    def add(self, road: Road) -> None:
        """Index a road under its name. Roads with empty names are skipped."""
        key = self._normalise(road.name)
        if not key:
            return
        node = self._root
        for char in key:
            node = node.children.setdefault(char, _TrieNode())
        node.roads.append(road)
        self._size += 1

    def _find(self, prefix: str) -> _TrieNode | None:
        node = self._root
        for char in prefix:
            next_node = node.children.get(char)
            if next_node is None:
                return None
            node = next_node
        return node

    def prefix_matches(self, prefix: str) -> list[Road]:
        """All roads whose name starts with the prefix, in name order."""
        key = self._normalise(prefix)
        if not key:
            return []
        start = self._find(key)
        if start is None:
            return []

        result: list[Road] = []
        stack = [start]
        while stack:
            node = stack.pop()
            result.extend(node.roads)
            # Reverse so the lexicographically smallest child is popped first
            stack.extend(node.children[c] for c in sorted(node.children, reverse=True))
        return result

    def search(self, query: str) -> list[Road]:
        """Roads matching the query, preferring exact name matches.

        Returns:
            Exact matches if any road name equals the query, otherwise all
            prefix matches. Empty list for a blank query.
        """
        matches = self.prefix_matches(prefix=query)
        key = self._normalise(query)
        exact = [road for road in matches if self._normalise(road.name) == key]
        logger.debug(f"Road search {query!r}: {len(matches)} prefix matches, {len(exact)} exact")
        return exact if exact else matches

    @staticmethod
    def distinct_names(roads: Iterable[Road]) -> list[str]:
        """Road names without duplicates, in first-seen order."""
        return list(dict.fromkeys(road.name for road in roads))
