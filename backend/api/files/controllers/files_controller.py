"""Files controller — API routes for uploaded file management."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from config import Settings
from dependencies import get_files_repository, get_settings
from errors import StorageProviderError
from api.files.dto.file import DeleteFileRequest, DeleteFileResponse, FileListResponse
from api.files.repositories.files_repository import FilesRepository
from api.files.services import files_service

router = APIRouter(tags=["Files"])


@router.get("/api/files", response_model=FileListResponse)
async def list_files(
    settings: Settings = Depends(get_settings),
    repository: FilesRepository = Depends(get_files_repository),
):
    listing = await files_service.list_files(repository, limit=settings.FILES_PAGE_SIZE)
    return FileListResponse(
        success=listing.error is None,
        files=listing.files,
        error=listing.error,
    )


@router.post("/delete-file", response_model=DeleteFileResponse)
async def delete_file(
    data: DeleteFileRequest,
    repository: FilesRepository = Depends(get_files_repository),
):
    try:
        deleted = await files_service.delete_file(
            repository, data.public_id, resource_type=data.resource_type
        )
    except StorageProviderError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"success": False, "error": f"Error deleting file: {e.message}"},
        )

    if not deleted:
        return JSONResponse(
            status_code=404,
            content={"success": False, "error": "File not found"},
        )
    return DeleteFileResponse(success=True, message="File deleted")
