"""Shared test fixtures."""

import pytest

from shortwspath.domain.job import Job
from shortwspath.domain.node import Node, NodeKind
from shortwspath.errors import ProbeError


class CountingChannel:
    """Channel stub that answers a fixed platform and counts queries."""

    def __init__(self, windows: bool = False, error: Exception = None) -> None:
        self.windows = windows
        self.error = error
        self.calls = 0

    def run(self, query):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return query.parse("Windows_NT" if self.windows else "Linux")


@pytest.fixture
def job():
    """A job nested in two folders with a long name."""
    return Job(full_name="folder1/folder2/My Very Long Job Name Indeed")


@pytest.fixture
def channel():
    return CountingChannel()


@pytest.fixture
def worker(channel):
    """An online Linux worker."""
    return Node(
        name="linux-1",
        kind=NodeKind.WORKER,
        remote_fs="/jenkins/workspace",
        channel=channel,
    )


@pytest.fixture
def windows_worker():
    return Node(
        name="win-1",
        kind=NodeKind.WORKER,
        remote_fs="C:\\jenkins\\workspace",
        channel=CountingChannel(windows=True),
    )


@pytest.fixture
def controller():
    return Node(
        name="",
        kind=NodeKind.CONTROLLER,
        root_path="/var/lib/jenkins",
        channel=CountingChannel(),
    )


@pytest.fixture
def failing_channel():
    return CountingChannel(error=ProbeError("connection reset"))


@pytest.fixture
def make_channel():
    """Factory for counting channel stubs."""
    return CountingChannel
