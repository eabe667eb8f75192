"""
Interned keys for network node identities.
"""

from typing import Dict, Iterator, List, Optional


class KeyArena:
    """
    Deterministic interning of node id strings into dense integer keys.

    Keys are assigned in first-seen order starting from ``start_key``, so
    building the same specification twice yields the same key for every id.
    """

    def __init__(self, start_key: int = 0):
        self.start_key = start_key
        self._keys: Dict[str, int] = {}
        self._ids: List[str] = []

    def intern(self, node_id: str) -> int:
        """Return the key for ``node_id``, assigning the next one if new."""
        key = self._keys.get(node_id)
        if key is None:
            key = self.start_key + len(self._ids)
            self._keys[node_id] = key
            self._ids.append(node_id)
        return key

    def key_of(self, node_id: str) -> Optional[int]:
        """Look up a key without assigning one."""
        return self._keys.get(node_id)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._keys

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def get_state(self) -> dict:
        """Get current state for copying or serialization."""
        return {
            "start_key": self.start_key,
            "ids": list(self._ids),
        }

    def set_state(self, state: dict) -> None:
        """Restore state produced by ``get_state``."""
        self.start_key = state["start_key"]
        self._ids = list(state["ids"])
        self._keys = {node_id: self.start_key + i for i, node_id in enumerate(self._ids)}
