"""Workspace locator - Decides whether a job gets a shortened workspace."""

import logging
from pathlib import PurePath
from typing import Optional

from .config import Settings
from .domain.job import Job
from .domain.node import Node
from .paths import default_path, short_path
from .probe import PathLengthProber

logger = logging.getLogger(__name__)


class _LookupLog(logging.LoggerAdapter):
    """Prefixes records with job@node and attaches both as extra fields."""

    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {}).update(self.extra)
        return f"[{self.extra['job']}@{self.extra['node']}] {msg}", kwargs


class ShortWorkspaceLocator:
    """Substitutes short workspace paths for jobs whose default path is too long.

    Attributes:
        settings: Thresholds and overrides
        prober: Per-node path length budgets
    """

    def __init__(self, settings: Optional[Settings] = None,
                 prober: Optional[PathLengthProber] = None) -> None:
        self.settings = settings or Settings()
        self.prober = prober or PathLengthProber(self.settings.limits)

    def locate(self, job: Job, node: Node) -> Optional[PurePath]:
        """Workspace path to use for a job on a node, or None for the default."""
        return self.resolve(job, node)[0]

    def resolve(self, job: Job,
                node: Node) -> tuple[Optional[PurePath], Optional[PurePath]]:
        """Decide the workspace for a job on a node.

        Decision sequence:
        1. Controller and not forced onto the controller: leave it alone
        2. Default path unknown: leave it alone
        3. Plenty of room and not forced: leave it alone
        4. Build the short candidate
        5. Candidate shorter than the default, or forced: use it
        6. Otherwise leave it alone

        Returns:
            (shortened path or None, default path or None). The default is
            None when it was not needed or could not be determined.
        """
        settings = self.settings
        log = _LookupLog(logger, {"job": job.full_name, "node": node.display_name})
        log.info(
            f"locate: force_master={settings.force_apply_to_controller} "
            f"force_short_ws={settings.force_short_workspace}"
        )

        if node.is_controller and not settings.force_apply_to_controller:
            log.info("ignoring controller node")
            return None, None

        default = default_path(job, node)
        if default is None:
            log.info("default path unknown, not touching it")
            return None, None
        log.info(f"default path == {default}")

        usable = self.prober.usable_length(default, node)
        if usable > settings.build_path_length and not settings.force_short_workspace:
            log.info(f"usable space ({usable}) > BUILD_PATH_LENGTH ({settings.build_path_length})")
            return None, default

        candidate = short_path(job, node, default)
        if candidate is None:
            log.info("no workspace root found")
            return None, default

        if len(str(candidate)) < len(str(default)) or settings.force_short_workspace:
            log.info(f"returning shortened path: {candidate}")
            return candidate, default

        log.info(f"shortened path: {candidate} >= original path: {default}")
        return None, default
