"""Request and response models."""

from typing import Optional
from pydantic import BaseModel, model_validator

from .channel import LocalChannel, SshChannel
from .domain.job import Job
from .domain.node import Node, NodeKind


class JobInfo(BaseModel):
    """Job identity as reported by the host."""
    full_name: str
    name: str = ""

    def to_job(self) -> Job:
        return Job(full_name=self.full_name, name=self.name)


class NodeInfo(BaseModel):
    """Node as reported by the host.

    Workers are probed over ssh when ssh_host is set. For nodes of other
    kinds the host sends its own default workspace in default_workspace.
    """
    name: str = ""
    kind: NodeKind = NodeKind.WORKER
    root_path: Optional[str] = None
    workspace_dir: str = "workspace"
    remote_fs: Optional[str] = None
    online: bool = True
    ssh_host: Optional[str] = None
    ssh_user: Optional[str] = None
    ssh_port: Optional[int] = None
    default_workspace: Optional[str] = None

    @model_validator(mode="after")
    def _named_unless_controller(self) -> "NodeInfo":
        if not self.name and self.kind is not NodeKind.CONTROLLER:
            raise ValueError(f"A {self.kind.value} node needs a name")
        return self

    def to_node(self, probe_timeout: float = 30.0) -> Node:
        channel = None
        if self.kind is NodeKind.CONTROLLER:
            channel = LocalChannel()
        elif self.ssh_host:
            channel = SshChannel(self.ssh_host, self.ssh_user, self.ssh_port, probe_timeout)

        default_workspace = self.default_workspace
        return Node(
            name=self.name,
            kind=self.kind,
            root_path=self.root_path,
            workspace_dir=self.workspace_dir,
            remote_fs=self.remote_fs,
            online=self.online,
            channel=channel,
            workspace_for=(lambda job: default_workspace) if default_workspace else None,
        )


class LocateRequest(BaseModel):
    """Workspace lookup for a job on a node."""
    job: JobInfo
    node: NodeInfo


class LocateResponse(BaseModel):
    """Result of a lookup.

    path is None when the host should use its default. default_path is None
    when the lookup stopped before it was needed or it could not be known.
    """
    path: Optional[str] = None
    default_path: Optional[str] = None


class NodeEventResponse(BaseModel):
    """Result of a node lifecycle event."""
    node: str
    event: str
    invalidated: bool
