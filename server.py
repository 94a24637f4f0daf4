"""
Runway Explorer - Gateway server
Two thin endpoints in front of the image-to-video provider.

Run with: uvicorn server:app --port 8000
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from explorer.errors import InvalidInput, GenerationFailed
from explorer.gateway import GenerationGateway
from explorer.provider import RunwayProvider
from explorer.settings import Settings

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    frontImage: Optional[str] = None
    backgroundImage: Optional[str] = None


class ExploreRequest(BaseModel):
    image: Optional[str] = None
    prompt: Optional[str] = None


def create_app(gateway: Optional[GenerationGateway] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the gateway application.

    Args:
        gateway: Gateway to serve; defaults to one backed by Runway
        settings: Configuration; defaults to the process environment

    Returns:
        FastAPI application
    """
    settings = settings or Settings.from_env()
    if gateway is None:
        gateway = GenerationGateway(
            RunwayProvider(api_key=settings.runway_api_secret or None),
            model=settings.runway_model,
            timeout=settings.task_timeout,
        )

    app = FastAPI(title="Runway Explorer Gateway")
    app.state.gateway = gateway

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(GenerationFailed)
    async def generation_failed_handler(request: Request, exc: GenerationFailed):
        logger.error(f"Runway generation error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/generate")
    def generate(body: GenerateRequest):
        """Generate the setting pan and the animated person videos."""
        result = app.state.gateway.generate(body.frontImage, body.backgroundImage)
        return result.to_dict()

    @app.post("/explore")
    def explore(body: ExploreRequest):
        """Generate one video from a captured frame and a prompt."""
        logger.info(f"Exploration requested: '{body.prompt}'")
        result = app.state.gateway.explore(body.image, body.prompt)
        return result.to_dict()

    return app


app = create_app()
