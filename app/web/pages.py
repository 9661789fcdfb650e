from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.core.config import settings

APP_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = APP_DIR / "templates"
STATIC_DIR = APP_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(include_in_schema=False)


@router.get("/", response_class=HTMLResponse)
def home_page(request: Request):
    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": settings.PROJECT_NAME, "api_prefix": settings.API_V1_PREFIX},
    )


@router.get("/students", response_class=HTMLResponse)
def students_page(request: Request):
    return templates.TemplateResponse(
        request,
        "students.html",
        {"title": "Student Management", "api_prefix": settings.API_V1_PREFIX},
    )
