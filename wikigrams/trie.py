# wikigrams/trie.py
# Character trie that counts terms in memory.
# A node's count is the number of insertions that passed through it, so the
# frequency of the term ending at a node alone is its count minus the counts
# of its children.

from __future__ import annotations

from wikigrams import config


class TrieNode:
    __slots__ = ("count", "terminal", "children")

    def __init__(self) -> None:
        self.count = 0
        self.terminal = False
        self.children: dict[str, TrieNode] = {}

    @property
    def frequency(self) -> int:
        """
        Occurrences of the term ending exactly here (0 for non-terminal nodes).
        """
        if not self.terminal:
            return 0
        return self.count - sum(child.count for child in self.children.values())


class Trie:
    """
    Prefix tree used instead of a hash map when a corpus fits in memory.
    """

    def __init__(self) -> None:
        self.root = TrieNode()
        self._terms = 0

    def insert(self, term: str, count: int = 1) -> None:
        """
        Add `count` occurrences of `term`: every node on its path (the root
        included) is incremented and the last one is marked terminal.
        """
        if not term or count <= 0:
            return

        node = self.root
        node.count += count
        for ch in term:
            child = node.children.get(ch)
            if child is None:
                child = node.children[ch] = TrieNode()
            child.count += count
            node = child

        if not node.terminal:
            node.terminal = True
            self._terms += 1

    def frequency(self, term: str) -> int:
        node = self._find(term)
        return node.frequency if node is not None else 0

    def _find(self, term: str) -> TrieNode | None:
        if not term:
            return None
        node = self.root
        for ch in term:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def items(self):
        """
        Yield (term, frequency) for every terminal node, depth-first.
        """
        stack: list[tuple[str, TrieNode]] = [("", self.root)]
        while stack:
            prefix, node = stack.pop()
            if node.terminal:
                yield prefix, node.frequency
            # reversed, so children pop in insertion order
            for ch, child in reversed(list(node.children.items())):
                stack.append((prefix + ch, child))

    def query(self, cutoff: int = config.DEFAULT_CUTOFF) -> list[tuple[str, int]]:
        """
        Terms whose own frequency is at least `cutoff`, most frequent first,
        ties in ascending term order.
        """
        hits = [(term, freq) for term, freq in self.items() if freq >= cutoff]
        hits.sort(key=lambda hit: (-hit[1], hit[0]))
        return hits

    def __len__(self) -> int:
        return self._terms
