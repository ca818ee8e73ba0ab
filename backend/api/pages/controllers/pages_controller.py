"""Pages controller — HTML routes for the web UI."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from config import Settings
from dependencies import get_files_repository, get_settings
from templating import page_context, templates
from api.files.repositories.files_repository import FilesRepository
from api.files.services import files_service

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, settings: Settings = Depends(get_settings)):
    return templates.TemplateResponse(
        request, "index.html", page_context(request, settings.PROJECT_NAME)
    )


@router.get("/files", response_class=HTMLResponse)
async def files_page(
    request: Request,
    settings: Settings = Depends(get_settings),
    repository: FilesRepository = Depends(get_files_repository),
):
    listing = await files_service.list_files(repository, limit=settings.FILES_PAGE_SIZE)
    return templates.TemplateResponse(
        request,
        "files.html",
        page_context(
            request,
            "Uploaded Files",
            files=listing.files,
            error=listing.error,
        ),
    )
