from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from api.routes import session as session_routes
from api.services.session import build_service
from repcount.config import DetectionConfig


def create_app(config: Optional[DetectionConfig] = None) -> FastAPI:
    app = FastAPI(
        title="Push-up Counter API",
        description="Control surface and frame intake for the repcount detector.",
        version="0.1.0",
    )
    app.state.detection = build_service(config)
    app.include_router(session_routes.router)

    @app.get("/", include_in_schema=False)
    async def redirect_to_docs() -> RedirectResponse:
        return RedirectResponse(url="/docs")

    return app


app = create_app()
