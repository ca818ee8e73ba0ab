"""Request dependencies — hand the startup-built settings and repository to routes."""

from fastapi import Request

from config import Settings
from api.files.repositories.files_repository import FilesRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_files_repository(request: Request) -> FilesRepository:
    return request.app.state.files_repository