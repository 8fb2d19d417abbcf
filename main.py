import logging
import sys
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from conceptgraph.routers import concepts
from conceptgraph.services.discovery.registry_database import (
    REGISTRIES,
    get_registry_database,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Concept Graph API", version="1.0.0")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"({time.perf_counter() - started:.3f}s)"
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Service status with the number of concepts in each registry."""
    db = get_registry_database()
    return {
        "status": "healthy",
        "registries": {registry: db.count(registry) for registry in REGISTRIES},
    }


app.include_router(concepts.router)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
