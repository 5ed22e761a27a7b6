from fastapi import FastAPI
from app.projection import router as projection_router
from app.cache import build_cache_from_env
from app.logging_setup import configure_logging, logging_middleware
import asyncio

def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="prj-resolver")
    app.middleware("http")(logging_middleware)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(projection_router)

    # Initialize cache synchronously
    try:
        loop = asyncio.get_event_loop()
    except RuntimeError:  # pragma: no cover
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    app.state.cache = loop.run_until_complete(build_cache_from_env())
    return app

app = create_app()
