import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from jarvis.planner.errors import StoreError
from jarvis.planner.router import router as planner_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Jarvis", version="0.1.0")
app.include_router(planner_router)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Storage failure", "detail": str(exc)})


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "api": {
            "goals": "/api/goals",
            "goal_detail": "/api/goals/{id}",
            "goal_complete": "/api/goals/{id}/complete",
            "goal_skip": "/api/goals/{id}/skip",
            "schedule": "/api/schedule",
            "progress": "/api/progress",
            "insights": "/api/insights",
            "config": "/api/config",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
