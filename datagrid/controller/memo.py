"""
Per-render-pass memoization.
"""

import json
from typing import Any, Callable, Dict, Tuple


class RenderMemo:
    """
    Cache derived values for one render pass.

    Entries are keyed by name and a hash of their inputs, so a state change
    within the pass recomputes. ``clear`` is called when the pass ends.
    """

    def __init__(self):
        self._values: Dict[Tuple[str, int], Any] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def fingerprint(inputs: Any) -> int:
        return hash(json.dumps(inputs, sort_keys=True, default=str))

    def memoize(self, name: str, compute: Callable[[], Any], inputs: Any = None) -> Any:
        key = (name, self.fingerprint(inputs))
        if key in self._values:
            self.hits += 1
            return self._values[key]
        self.misses += 1
        value = compute()
        self._values[key] = value
        return value

    def forget(self, name: str) -> None:
        for key in [k for k in self._values if k[0] == name]:
            del self._values[key]

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)
