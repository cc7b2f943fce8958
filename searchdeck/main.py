from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from searchdeck import __version__
from searchdeck.api.endpoints import router as api_router
from searchdeck.api.errors import provider_error_handler
from searchdeck.clients.registry import ProviderClients, build_provider_clients
from searchdeck.core.config import Config
from searchdeck.core.exceptions import ProviderClientError
from searchdeck.core.logging import configure_root_logging, normalize_log_level


def create_app(config: Config | None = None, clients: ProviderClients | None = None) -> FastAPI:
    """Build the FastAPI app.

    Injected clients are left open on shutdown; clients built here from
    ``config`` are closed by the lifespan.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = None
        if clients is None:
            owned = build_provider_clients(config or Config())
        app.state.clients = clients or owned
        try:
            yield
        finally:
            if owned is not None:
                await owned.aclose()

    app = FastAPI(title="searchdeck", version=__version__, lifespan=lifespan)
    app.include_router(api_router)
    app.add_exception_handler(ProviderClientError, provider_error_handler)
    return app


app = create_app()


def main() -> None:
    config = Config()
    configure_root_logging(config.log_level)

    log_level = normalize_log_level(config.log_level).lower()
    uvicorn.run(
        "searchdeck.main:app",
        host=config.host,
        port=config.port,
        log_level=log_level,
        access_log=log_level == "debug",
        reload=False,
    )


if __name__ == "__main__":
    main()
