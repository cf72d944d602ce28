"""Channels for running small queries on build nodes.

A query knows how to answer itself in-process and how to answer from the
output of a shell command run on the node. Channels pick one of the two.
"""

import logging
import subprocess
import sys
from typing import Optional, Protocol

from .config import PathLimits
from .errors import ProbeError

logger = logging.getLogger(__name__)

SSH_ERROR = 255


class MaxPathLengthQuery:
    """Discover the maximum filesystem path length on a node.

    Runs "uname -s". POSIX shells answer with the kernel name, Windows shells
    under Cygwin, MSYS or Git Bash answer with a CYGWIN_NT or MINGW name, and
    cmd.exe or PowerShell fail because there is no uname.
    """

    command = "uname -s"
    windows_markers = ("windows", "cygwin", "mingw", "msys")

    def __init__(self, limits: Optional[PathLimits] = None) -> None:
        self.limits = limits or PathLimits()

    def local(self) -> int:
        return self.limits.for_platform(sys.platform.startswith(("win", "cygwin", "msys")))

    def parse(self, output: str) -> int:
        output = output.lower()
        return self.limits.for_platform(any(m in output for m in self.windows_markers))

    def command_missing(self) -> int:
        """Limit for a node whose shell has no uname: cmd.exe or PowerShell."""
        return self.limits.windows

    def __str__(self) -> str:
        return "discover max FS path length on node"


class NodeChannel(Protocol):
    """Anything that can run a query on a node."""

    def run(self, query: MaxPathLengthQuery) -> int:
        ...


class LocalChannel:
    """Runs queries in this process (the controller)."""

    def run(self, query: MaxPathLengthQuery) -> int:
        return query.local()

    def __repr__(self) -> str:
        return "LocalChannel()"


class SshChannel:
    """Runs queries on a remote node via ssh."""

    def __init__(self, host: str, user: Optional[str] = None,
                 port: Optional[int] = None, timeout: float = 30.0) -> None:
        self.host = host
        self.user = user
        self.port = port
        self.timeout = timeout

    def _ssh_args(self, command: str) -> list[str]:
        args = ["ssh", "-o", "BatchMode=yes"]
        if self.port:
            args += ["-p", str(self.port)]
        target = f"{self.user}@{self.host}" if self.user else self.host
        return args + [target, command]

    def run(self, query: MaxPathLengthQuery) -> int:
        """Run the query's command on the node and parse its output.

        ssh exits 255 when it cannot reach the node; any other non-zero exit
        comes from the remote shell and means the command is missing there.

        Raises:
            ProbeError: If ssh is missing, times out or cannot reach the node
        """
        logger.debug(f"Running '{query.command}' on {self.host}")
        try:
            result = subprocess.run(
                self._ssh_args(query.command),
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ProbeError(f"ssh not available: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f"Timed out after {self.timeout}s on {self.host}") from e
        except UnicodeDecodeError as e:
            raise ProbeError(f"Unreadable output from {self.host}: {e}") from e
        except OSError as e:
            raise ProbeError(f"Unable to reach {self.host}: {e}") from e

        if result.returncode == SSH_ERROR:
            raise ProbeError(
                f"Query failed on {self.host} (exit {result.returncode}): "
                f"{result.stderr.strip()}"
            )
        if result.returncode != 0:
            logger.debug(f"'{query.command}' not available on {self.host}: {result.stderr.strip()}")
            return query.command_missing()
        return query.parse(result.stdout)

    def __repr__(self) -> str:
        return f"SshChannel({self.host!r})"
