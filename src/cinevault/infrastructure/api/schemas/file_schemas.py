"""Pydantic schemas for movie file endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class MovieFileResponse(BaseModel):
    """Metadata of an uploaded movie file.

    The storage key and content hash stay server-side.
    """

    id: int = Field(..., description="File ID")
    movie_id: int = Field(..., description="Owning movie ID")
    file_name: str = Field(..., description="Original file name")
    file_size: int = Field(..., description="Size in bytes")
    content_type: str = Field(..., description="MIME type")
    created_at: datetime = Field(..., description="When the file was uploaded")

    model_config = {"from_attributes": True}
