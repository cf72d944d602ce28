"""Workspace path composition for jobs on nodes.

Default paths mirror the host's own rules so that the decision to shorten
compares against what the host would otherwise pick. Nothing here touches
the filesystem.
"""

import hashlib
from pathlib import PurePath
from typing import Optional

from .domain.job import Job
from .domain.node import Node, NodeKind, pure_path

SHORT_NAME_LENGTH = 16
DIGEST_LENGTH = 8


def workspace_root(node: Node) -> Optional[PurePath]:
    """Workspace root of a node, or None if it cannot be determined."""
    if node.kind is NodeKind.CONTROLLER:
        if not node.root_path:
            return None
        return pure_path(node.root_path) / node.workspace_dir
    if node.kind is NodeKind.WORKER:
        if not node.online or not node.remote_fs:
            return None  # Offline
        return pure_path(node.remote_fs)
    return None  # Only the oracle knows


def _oracle_path(job: Job, node: Node) -> Optional[PurePath]:
    if node.workspace_for is None:
        return None
    location = node.workspace_for(job)
    return pure_path(location) if location else None


def default_path(job: Job, node: Node) -> Optional[PurePath]:
    """The workspace path the host would use for a job on a node.

    Returns None when the path cannot be known (offline worker, no oracle).
    """
    if node.kind is NodeKind.CONTROLLER:
        root = workspace_root(node)
        if root is None:
            return None
        return root / job.full_name.replace("/", "_")
    if node.kind is NodeKind.WORKER:
        root = workspace_root(node)
        if root is None:
            return None
        return root / job.full_name
    return _oracle_path(job, node)


def short_name(name: str) -> str:
    """Hard-cut a job name to 16 characters.

    "..." is replaced with "_": older msbuild normalizes paths itself and
    rejects "..." as a path segment.
    """
    return name[:SHORT_NAME_LENGTH].replace("...", "_")


def digest_of(text: str) -> str:
    """Lowercase hex MD5 digest of a string."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def short_path(job: Job, node: Node,
               default: Optional[PurePath] = None) -> Optional[PurePath]:
    """Deterministic shortened workspace candidate for a job on a node.

    For OTHER nodes the candidate goes next to the default path; pass the
    already resolved default to avoid asking the oracle again.
    """
    if node.kind is NodeKind.OTHER:
        if default is None:
            default = _oracle_path(job, node)
        root = default.parent if default is not None else None
    else:
        root = workspace_root(node)
    if root is None:
        return None
    return root / (short_name(job.name) + digest_of(job.full_name)[:DIGEST_LENGTH])
