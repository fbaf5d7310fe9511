"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    company = "company"


class JobType(str, Enum):
    internship = "internship"
    part_time = "part-time"
    full_time = "full-time"


class JobStatus(str, Enum):
    active = "active"
    closed = "closed"


class ApplicationStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class JobSort(str, Enum):
    date_desc = "date_desc"
    date_asc = "date_asc"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole
    bio: Optional[str] = None
    level_of_study: Optional[str] = None
    company_description: Optional[str] = None

class RegisterResponse(BaseModel):
    message: str
    user_id: int
    role: str

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email", "password", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value

class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=6)


# ============================================================
# USER SCHEMAS
# ============================================================

class UserResponse(BaseModel):
    id: int
    full_name: str
    email: str
    role: str
    bio: Optional[str] = None
    level_of_study: Optional[str] = None
    cv_link: Optional[str] = None
    interests: Optional[str] = None
    company_description: Optional[str] = None
    company_logo: Optional[str] = None
    created_at: datetime

class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=150)
    bio: Optional[str] = None
    level_of_study: Optional[str] = None
    cv_link: Optional[str] = None
    interests: Optional[str] = None
    company_description: Optional[str] = None
    company_logo: Optional[str] = None

class TokenResponse(BaseModel):
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = None
    job_type: JobType = JobType.full_time
    location: Optional[str] = None
    salary: Optional[str] = None
    requirements: Optional[str] = None

class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = None
    job_type: Optional[JobType] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    requirements: Optional[str] = None
    status: Optional[JobStatus] = None

class JobCreatedResponse(BaseModel):
    message: str
    job_id: int

class JobResponse(BaseModel):
    id: int
    company_id: int
    company_name: Optional[str] = None
    company_logo: Optional[str] = None
    title: str
    description: Optional[str] = None
    job_type: str
    location: Optional[str] = None
    salary: Optional[str] = None
    requirements: Optional[str] = None
    status: str
    created_at: datetime

class JobDetailResponse(JobResponse):
    company_email: Optional[str] = None
    company_description: Optional[str] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationStatusUpdate(BaseModel):
    status: str

class StudentApplicationResponse(BaseModel):
    id: int
    job_id: int
    student_id: int
    status: str
    applied_at: datetime
    title: str
    job_type: str
    location: Optional[str] = None
    company_name: str

class ApplicantResponse(BaseModel):
    id: int
    job_id: int
    student_id: int
    status: str
    applied_at: datetime
    student_name: str
    student_email: str
    level_of_study: Optional[str] = None
    cv_link: Optional[str] = None
    bio: Optional[str] = None


# ============================================================
# BOOKMARK SCHEMAS
# ============================================================

class BookmarkCreate(BaseModel):
    job_id: int

class BookmarkResponse(BaseModel):
    bookmark_id: int
    bookmarked_at: datetime
    job: JobResponse

class BookmarkCheckResponse(BaseModel):
    is_bookmarked: bool


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class NotificationResponse(BaseModel):
    id: int
    user_id: int
    message: str
    is_read: bool
    created_at: datetime

class UnreadCountResponse(BaseModel):
    count: int


# ============================================================
# CONVERSATION SCHEMAS
# ============================================================

class ConversationCreate(BaseModel):
    student_id: int
    company_id: int
    job_id: int

class ConversationCreatedResponse(BaseModel):
    message: str
    conversation_id: int

class ConversationResponse(BaseModel):
    id: int
    student_id: int
    company_id: int
    job_id: int
    last_message: Optional[str] = None
    last_message_time: Optional[datetime] = None
    created_at: datetime
    student_name: str
    company_name: str
    job_title: Optional[str] = None
    unread_count: int = 0

class MessageCreate(BaseModel):
    message: str

class MessageSentResponse(BaseModel):
    message: str
    message_id: int

class ChatMessageResponse(BaseModel):
    id: int
    conversation_id: int
    sender_id: int
    message: str
    is_read: bool
    created_at: datetime
    sender_name: str
    sender_role: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
