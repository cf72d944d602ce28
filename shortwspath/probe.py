"""Per-node path length budgets.

The platform limit of a node is queried once and cached under the node's
kind and name until the host reports the node reconnected or disconnected.
"""

import logging
import math
import threading
from pathlib import PurePath
from typing import Optional, Union

from .channel import MaxPathLengthQuery
from .config import PathLimits
from .domain.node import Node
from .errors import NodeOfflineError, ProbeError

logger = logging.getLogger(__name__)


class PathLengthProber:
    """Supplies the usable path length left under a default workspace path."""

    def __init__(self, limits: Optional[PathLimits] = None) -> None:
        self.query = MaxPathLengthQuery(limits)
        self._budgets: dict[tuple[str, str], int] = {}
        self._lock = threading.Lock()

    def _probe(self, node: Node) -> int:
        if node.channel is None or not node.online:
            raise NodeOfflineError(node.name)
        platform_max = node.channel.run(self.query)
        if node.windows_paths and platform_max != self.query.limits.windows:
            logger.info(f"{node} reported {platform_max} but has a Windows workspace root")
            return self.query.limits.windows
        return platform_max

    def budget(self, node: Node) -> int:
        """Platform maximum path length of a node, probing it if needed.

        Raises:
            ProbeError: If the node could not be queried
        """
        with self._lock:
            cached = self._budgets.get(node.cache_key)
        if cached is not None:
            return cached

        platform_max = self._probe(node)
        with self._lock:
            return self._budgets.setdefault(node.cache_key, platform_max)

    def usable_length(self, default_path: PurePath, node: Node) -> Union[int, float]:
        """Budget left for a build under default_path; may be negative.

        Returns math.inf when the node cannot be probed, which means
        "never intercept". Failures are not cached.
        """
        try:
            platform_max = self.budget(node)
        except (ProbeError, OSError, UnicodeError):
            logger.info(f"Unable to {self.query} ({node})", exc_info=True)
            return math.inf

        prefix_length = len(str(default_path))
        logger.info(f"usable space=max({platform_max})-{prefix_length} ({default_path})")
        return platform_max - prefix_length

    def invalidate(self, node_name: str) -> Optional[int]:
        """Forget the budgets of every node with this name.

        Returns an evicted value, or None if nothing was cached.
        """
        with self._lock:
            keys = [key for key in self._budgets if key[1] == node_name]
            evicted = [self._budgets.pop(key) for key in keys]
        if not evicted:
            return None
        logger.info(f"Invalidated path length budget for {node_name or '(controller)'}")
        return evicted[0]

    def clear(self) -> None:
        with self._lock:
            self._budgets.clear()

    def snapshot(self) -> dict[str, int]:
        """Copy of all cached budgets, keyed by "kind:name"."""
        with self._lock:
            return {f"{kind}:{name}": value for (kind, name), value in self._budgets.items()}
