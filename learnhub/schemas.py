"""
Request and response schemas

Wire format is camelCase; request bodies also accept snake_case names.
Unknown request fields are ignored, so a client-sent "isAdmin" never
reaches the registration path.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

ContactPurpose = Literal["become_admin", "share_course", "copyright", "other"]


class Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---------- Auth / users ----------

class RegisterRequest(Schema):
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=6)
    email: Optional[EmailStr] = None


class LoginRequest(Schema):
    username: str
    password: str


class ProfileRequest(Schema):
    full_name: Optional[str] = Field(None, min_length=2)
    bio: Optional[str] = None
    interest: Optional[str] = None
    profile_image_url: Optional[str] = None


class ProfileOut(Schema):
    id: int
    user_id: int
    full_name: Optional[str] = None
    bio: Optional[str] = None
    interest: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserOut(Schema):
    """A user as seen by themselves. There is no password field."""

    id: int
    username: str
    email: Optional[str] = None
    is_admin: bool
    has_completed_profile: bool
    created_at: datetime
    profile: Optional[ProfileOut] = None


class UserSummary(Schema):
    id: int
    username: str
    full_name: Optional[str] = None


# ---------- Catalog ----------

class CategoryCreate(Schema):
    name: str = Field(..., min_length=2)
    description: str = Field(..., min_length=10)
    image_url: str = Field(..., min_length=1)


class CategoryUpdate(Schema):
    name: Optional[str] = Field(None, min_length=2)
    description: Optional[str] = Field(None, min_length=10)
    image_url: Optional[str] = Field(None, min_length=1)


class CategoryOut(Schema):
    id: int
    name: str
    slug: str
    description: str
    image_url: str
    created_at: datetime
    updated_at: datetime


class CourseCreate(Schema):
    title: str = Field(..., min_length=5)
    description: str = Field(..., min_length=10)
    long_description: Optional[str] = None
    image_url: str = Field(..., min_length=1)
    category_id: int
    instructor_id: Optional[int] = None
    price: Optional[float] = Field(None, ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    duration: str = Field(..., min_length=1)
    learning_objectives: List[str] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    target_audience: List[str] = Field(default_factory=list)


class CourseUpdate(Schema):
    title: Optional[str] = Field(None, min_length=5)
    description: Optional[str] = Field(None, min_length=10)
    long_description: Optional[str] = None
    image_url: Optional[str] = Field(None, min_length=1)
    category_id: Optional[int] = None
    instructor_id: Optional[int] = None
    price: Optional[float] = Field(None, ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    duration: Optional[str] = Field(None, min_length=1)
    learning_objectives: Optional[List[str]] = None
    requirements: Optional[List[str]] = None
    target_audience: Optional[List[str]] = None


class CourseOut(Schema):
    id: int
    title: str
    slug: str
    description: str
    long_description: Optional[str] = None
    image_url: str
    category_id: int
    instructor_id: int
    price: Optional[float] = None
    original_price: Optional[float] = None
    duration: str
    lesson_count: int
    rating: Optional[float] = None
    review_count: int
    learning_objectives: Optional[List[str]] = None
    requirements: Optional[List[str]] = None
    target_audience: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime
    category: Optional[CategoryOut] = None
    instructor: Optional[UserSummary] = None


class LessonCreate(Schema):
    title: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    content: Optional[str] = None
    video_url: Optional[str] = None
    duration: str = Field(..., min_length=1)
    position: Optional[int] = Field(None, ge=1)


class LessonUpdate(Schema):
    title: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = Field(None, min_length=10)
    content: Optional[str] = None
    video_url: Optional[str] = None
    duration: Optional[str] = Field(None, min_length=1)
    position: Optional[int] = Field(None, ge=1)


class LessonOut(Schema):
    id: int
    course_id: int
    title: str
    description: str
    content: Optional[str] = None
    video_url: Optional[str] = None
    duration: str
    position: int
    created_at: datetime
    updated_at: datetime


# ---------- Enrollments ----------

class ProgressUpdate(Schema):
    progress: int


class EnrollmentOut(Schema):
    id: int
    user_id: int
    course_id: int
    progress: int
    completed: bool
    created_at: datetime
    updated_at: datetime


class EnrollmentWithCourse(EnrollmentOut):
    course: CourseOut


class EnrollmentStatus(Schema):
    enrolled: bool
    enrollment: Optional[EnrollmentOut] = None


# ---------- Reviews ----------

class ReviewCreate(Schema):
    title: str = Field(..., min_length=3)
    content: str = Field(..., min_length=10)
    rating: int = Field(..., ge=1, le=5)


class ReviewUpdate(Schema):
    title: Optional[str] = Field(None, min_length=3)
    content: Optional[str] = Field(None, min_length=10)
    rating: Optional[int] = Field(None, ge=1, le=5)


class ReviewOut(Schema):
    id: int
    user_id: int
    course_id: int
    title: str
    content: str
    rating: int
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None


# ---------- Contact ----------

class ContactCreate(Schema):
    name: str = Field(..., min_length=2)
    email: EmailStr
    telegram_username: Optional[str] = None
    purpose: ContactPurpose
    message: str = Field(..., min_length=10)


class ContactOut(Schema):
    id: int
    name: str
    email: str
    telegram_username: Optional[str] = None
    purpose: str
    message: str
    is_read: bool
    created_at: datetime


# ---------- Misc ----------

class MessageOut(Schema):
    message: str


class DashboardStats(Schema):
    users: int
    courses: int
    categories: int
    enrollments: int
    completed_enrollments: int
    reviews: int
    unread_contacts: int
