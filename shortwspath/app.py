"""FastAPI application exposing the workspace locator to the host."""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException

from . import __version__
from .config import Settings
from .locator import ShortWorkspaceLocator
from .models import LocateRequest, LocateResponse, NodeEventResponse

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the service around a single locator.

    Settings default to the environment; malformed values raise ConfigError
    here so the service fails at startup.
    """
    settings = settings or Settings.from_env()
    locator = ShortWorkspaceLocator(settings)
    app = FastAPI(title="shortwspath", version=__version__)
    app.state.locator = locator

    logger.info(
        f"Starting with BUILD_PATH_LENGTH={settings.build_path_length} "
        f"FORCE_SHORT_WS={settings.force_short_workspace} "
        f"FORCE_MASTER={settings.force_apply_to_controller}"
    )

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.post("/locate", response_model=LocateResponse)
    def locate(req: LocateRequest) -> LocateResponse:
        """Workspace path for a job on a node; path is null to keep the default."""
        job = req.job.to_job()
        node = req.node.to_node(settings.probe_timeout)
        path, default = locator.resolve(job, node)
        return LocateResponse(
            path=str(path) if path is not None else None,
            default_path=str(default) if default is not None else None,
        )

    @app.post("/nodes/{name}/{event}", response_model=NodeEventResponse)
    async def node_event(name: str, event: str) -> NodeEventResponse:
        """Node connected or disconnected: its cached budget is stale."""
        if event not in ("connected", "disconnected"):
            raise HTTPException(404, f"Unknown node event: {event}")
        evicted = locator.prober.invalidate(name)
        logger.info(f"Node {name} {event}")
        return NodeEventResponse(node=name, event=event, invalidated=evicted is not None)

    @app.get("/budgets")
    async def list_budgets():
        """List cached path length budgets per node."""
        return {"budgets": locator.prober.snapshot()}

    return app


app = create_app()
