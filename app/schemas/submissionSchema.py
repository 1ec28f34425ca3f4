from typing import List, Optional
from pydantic import BaseModel, Field


class ContactSubmissionRequest(BaseModel):
    """Request schema for contact form submission.

    Fields are optional here so missing values reach the validator and come
    back as a 400 with the validation reason.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class ContactSubmissionResponse(BaseModel):
    """Response schema for contact form submission."""
    success: bool = True
    message: str


class SubmissionOut(BaseModel):
    id: str = Field(alias="_id")
    name: str
    email: str
    message: str
    status: str
    createdAt: str
    updatedAt: Optional[str] = None

    model_config = {"populate_by_name": True}


class SubmissionListResponse(BaseModel):
    success: bool = True
    contacts: List[SubmissionOut]


class SubmissionDetailResponse(BaseModel):
    success: bool = True
    contact: SubmissionOut


class SubmissionStats(BaseModel):
    total: int
    new: int
    read: int
    replied: int


class SubmissionStatsResponse(BaseModel):
    success: bool = True
    stats: SubmissionStats


class StatusUpdateRequest(BaseModel):
    """Body of a status PATCH; the value is checked against SubmissionStatus by the store."""
    status: Optional[str] = None


class StatusUpdateResponse(BaseModel):
    success: bool = True
    message: str


class AdminSessionRequest(BaseModel):
    api_key: str
