from __future__ import annotations

from typing import Literal

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, Field

from skillbridge.catalogs import load_catalog
from skillbridge.config import Settings, load_settings
from skillbridge.logger import setup_logger
from skillbridge.matching import get_matcher
from skillbridge.orchestrator import RecommendationService
from skillbridge.stores import Store, build_store

APP_TITLE = "SkillBridge"
APP_SUBTITLE = "Internship, project and skill-gap recommendations for students"

ERROR_STATUS = {
    "ProfileNotFoundError": 404,
    "UnsupportedRecommendationError": 400,
}
DEFAULT_ERROR_STATUS = 502


class RecommendationRequest(BaseModel):
    user_id: str = Field(alias="userId", min_length=1)
    type: Literal["internships", "projects", "skills"]
    search: str = ""
    location: str = ""
    opportunity_type: str = Field(default="", alias="opportunityType")

    def filters(self) -> dict[str, str]:
        return {"search": self.search, "location": self.location, "type_": self.opportunity_type}


def build_service(settings: Settings, store: Store | None = None) -> RecommendationService:
    return RecommendationService(
        store=store or build_store(settings),
        catalog=load_catalog(settings.data_dir),
        matcher=get_matcher(settings.matcher),
        opportunity_limit=settings.opportunity_limit,
        strict_persistence=settings.strict_persistence,
    )


def create_app(settings: Settings | None = None, store: Store | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logger(settings.log_level)
    service = build_service(settings, store)
    logger.info(f"{APP_TITLE} ready (store={service.store.name}, matcher={service.matcher.name})")

    api = FastAPI(title=APP_TITLE, description=APP_SUBTITLE, version="0.1.0")
    api.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    @api.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = []
        for error in exc.errors():
            where = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            messages.append(f"{where}: {error['msg']}" if where else error["msg"])
        logger.info(f"Rejected request to {request.url.path}: {messages}")
        return JSONResponse(status_code=422, content={"error": "; ".join(messages)})

    @api.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "store": service.store.name}

    @api.post("/generate-recommendations")
    def generate_recommendations(request: RecommendationRequest):
        outcome = service.generate(request.user_id, request.type, request.filters())
        if outcome.ok:
            body = {"recommendations": outcome.recommendations}
            if outcome.warnings:
                body["warnings"] = outcome.warnings
            return body

        status = ERROR_STATUS.get(outcome.error_type or "", DEFAULT_ERROR_STATUS)
        body = {"error": outcome.error}
        if outcome.recommendations is not None:
            body["recommendations"] = outcome.recommendations
        return JSONResponse(status_code=status, content=body)

    return api


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
