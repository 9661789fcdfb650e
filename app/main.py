from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.database import check_database_connection, init_db
from app.core.handlers import register_exception_handlers
from app.core.logging import logger
from app.api.v1.router import api_router
from app.web import pages


def log_routes():
    prefix = f"{settings.API_V1_PREFIX}/students"
    logger.info("API endpoints:")
    logger.info(f"GET    {prefix}        - list students")
    logger.info(f"GET    {prefix}/search - search students (params: name, major, grade)")
    logger.info(f"GET    {prefix}/{{id}}   - get student by id")
    logger.info(f"POST   {prefix}        - create student")
    logger.info(f"PUT    {prefix}/{{id}}   - update student")
    logger.info(f"DELETE {prefix}/{{id}}   - delete student")
    logger.info(f"Web interface: http://{settings.HOST}:{settings.PORT}/students")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    log_routes()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_PREFIX)

# HTML front end
app.include_router(pages.router)
app.mount("/static", StaticFiles(directory=str(pages.STATIC_DIR)), name="static")


@app.get("/health")
def health():
    """
    Health check endpoint
    """
    return {
        "status": "ok",
        "database": check_database_connection(),
        "version": settings.APP_VERSION
    }


def run():
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
