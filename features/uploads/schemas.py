from datetime import datetime
from typing import Optional

from ninja import Schema

from features.analysis.schemas import AnalysisOutSchema


class StoredFileSchema(Schema):
    storage_id: str
    original_name: str
    url: str
    size: int
    mime_type: str
    width: Optional[int] = None
    height: Optional[int] = None


class UploadStatsSchema(Schema):
    total_analyses: int
    total_files: int
    subscription_tier: str
    remaining_uploads: Optional[int] = None


class UploadAnalysisResponse(Schema):
    success: bool
    message: str
    data: AnalysisOutSchema


class StoredFileResponse(Schema):
    success: bool
    message: str
    data: StoredFileSchema


class UploadStatsResponse(Schema):
    success: bool
    message: str
    data: UploadStatsSchema


class MessageResponse(Schema):
    success: bool
    message: str
    data: Optional[dict] = None


class FileInfoSchema(Schema):
    storage_id: str
    url: str
    size: int
    mime_type: str
    created_at: datetime


class FileInfoResponse(Schema):
    success: bool
    message: str
    data: FileInfoSchema
