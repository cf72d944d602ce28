"""Node entity - A compute target on which job workspaces live."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Callable, Optional

from ..channel import NodeChannel
from .job import Job

_WINDOWS_ROOT = re.compile(r"^(?:[A-Za-z]:|\\\\)")


class NodeKind(Enum):
    """Kind of compute target."""

    CONTROLLER = "controller"
    WORKER = "worker"
    OTHER = "other"


def pure_path(path: str) -> PurePath:
    """Wrap a remote path string in the matching pure path flavor.

    Drive letters, UNC prefixes and backslash-only paths are Windows paths;
    anything else is treated as POSIX.
    """
    if _WINDOWS_ROOT.match(path) or ("\\" in path and "/" not in path):
        return PureWindowsPath(path)
    return PurePosixPath(path)


@dataclass
class Node:
    """A controller or worker known to the host.

    Attributes:
        name: Stable node identifier ("" for the controller)
        kind: Controller, worker or some other kind of node
        root_path: Controller home directory
        workspace_dir: Controller workspace directory, relative to root_path
        remote_fs: Worker workspace root, None when unknown
        online: Whether the node is currently connected
        channel: Channel for running queries on the node
        workspace_for: Default workspace oracle for OTHER nodes
    """

    name: str
    kind: NodeKind = NodeKind.WORKER
    root_path: Optional[str] = None
    workspace_dir: str = "workspace"
    remote_fs: Optional[str] = None
    online: bool = True
    channel: Optional[NodeChannel] = None
    workspace_for: Optional[Callable[[Job], Optional[str]]] = None

    def __post_init__(self) -> None:
        if not self.name and self.kind is not NodeKind.CONTROLLER:
            raise ValueError(f"A {self.kind.value} node needs a name")

    @property
    def is_controller(self) -> bool:
        return self.kind is NodeKind.CONTROLLER

    @property
    def cache_key(self) -> tuple[str, str]:
        return self.kind.value, self.name

    @property
    def windows_paths(self) -> bool:
        """Whether the node's workspace root is a Windows path."""
        root = self.root_path if self.is_controller else self.remote_fs
        return bool(root) and isinstance(pure_path(root), PureWindowsPath)

    @property
    def display_name(self) -> str:
        return self.name or "(controller)"

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.display_name}"
