"""File upload endpoints."""

import logging
from typing import List, Optional

from asgiref.sync import sync_to_async
from ninja import File, Form, Router
from ninja.files import UploadedFile

from core.utils.exceptions import NotFoundError
from core.utils.responses import success_response
from features.auth.api import AuthBearer, require_principal
from . import service
from .schemas import (
    FileInfoResponse,
    MessageResponse,
    StoredFileResponse,
    UploadAnalysisResponse,
    UploadStatsResponse,
)

logger = logging.getLogger(__name__)
router = Router(auth=AuthBearer())


@router.post("/files", response={201: UploadAnalysisResponse})
async def upload_files(
    request,
    files: List[UploadedFile] = File(...),
    orientation: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
):
    """Upload 1-5 floor-plan files and create a pending analysis for them."""
    data = await sync_to_async(service.upload_analysis_files)(
        require_principal(request),
        files,
        orientation=orientation,
        title=title,
        description=description,
    )
    return 201, success_response(data, "Files uploaded successfully")


@router.post("/single", response={201: StoredFileResponse})
async def upload_single(request, file: UploadedFile = File(...)):
    data = await sync_to_async(service.upload_single_file)(
        require_principal(request), file
    )
    return 201, success_response(data, "File uploaded successfully")


@router.get("/files/{path:storage_id}", response=FileInfoResponse)
async def file_info(request, storage_id: str):
    data = await sync_to_async(service.file_info)(
        require_principal(request), storage_id
    )
    return success_response(data)


@router.delete("/files/{path:storage_id}", response=MessageResponse)
async def delete_file(request, storage_id: str):
    deleted = await sync_to_async(service.delete_file)(
        require_principal(request), storage_id
    )
    if not deleted:
        raise NotFoundError("File not found")
    return success_response(None, "File deleted successfully")


@router.get("/stats", response=UploadStatsResponse)
async def upload_stats(request):
    data = await sync_to_async(service.upload_stats)(require_principal(request))
    return success_response(data)
