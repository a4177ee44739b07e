from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class UserType(str, Enum):
    regular = "regular"
    moderator = "moderator"
    admin = "admin"


class ExperienceType(str, Enum):
    visited = "visited"
    imagined = "imagined"


class ApprovalStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class RequestStatus(str, Enum):
    active = "active"
    completed = "completed"
    cancelled = "cancelled"


class MatchStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class ExperienceLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    expert = "expert"


class AccessLevel(str, Enum):
    limited = "limited"
    standard = "standard"
    full = "full"


# Read models

class User(BaseModel):
    user_id: str
    name: str
    username: str
    email: EmailStr
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    created_at: datetime
    user_type: UserType = UserType.regular


class RegularUser(User):
    experience_level: ExperienceLevel = ExperienceLevel.beginner


class Moderator(User):
    access_level: AccessLevel = AccessLevel.limited


class Admin(User):
    access_level: AccessLevel = AccessLevel.full


class Profile(BaseModel):
    profile_id: str
    user_id: str
    bio: Optional[str] = None
    cover_image: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    followers_count: int = Field(0, ge=0)
    following_count: int = Field(0, ge=0)


class City(BaseModel):
    city_id: str
    name: str
    province: str
    description: Optional[str] = None
    image: Optional[str] = None


class Place(BaseModel):
    place_id: str
    city_id: str
    name: str
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    map_url: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)


class Post(BaseModel):
    post_id: str
    user_id: str
    place_id: Optional[str] = None
    city_id: Optional[str] = None
    title: str
    content: str
    experience_type: ExperienceType
    approval_status: ApprovalStatus = ApprovalStatus.pending
    created_at: datetime
    images: List[str] = Field(default_factory=list)
    avg_rating: float = Field(0, ge=0, le=5)
    rating_count: int = Field(0, ge=0)


class Comment(BaseModel):
    comment_id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime


class Rating(BaseModel):
    user_id: str
    post_id: str
    score: int = Field(..., ge=1, le=5)
    created_at: datetime


class Follow(BaseModel):
    follower_id: str
    following_id: str
    created_at: datetime


class CompanionRequest(BaseModel):
    request_id: str
    user_id: str
    destination_place_id: Optional[str] = None
    destination_city_id: Optional[str] = None
    travel_date: date
    description: str
    status: RequestStatus = RequestStatus.active
    created_at: datetime
    conditions: List[str] = Field(default_factory=list)


class CompanionMatch(BaseModel):
    match_id: str
    request_id: str
    companion_user_id: str
    status: MatchStatus = MatchStatus.pending
    message: Optional[str] = None
    created_at: datetime


# Write models

class PostCreate(BaseModel):
    user_id: str
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    experience_type: ExperienceType
    place_id: Optional[str] = None
    city_id: Optional[str] = None
    images: List[str] = Field(default_factory=list)


class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    experience_type: Optional[ExperienceType] = None
    place_id: Optional[str] = None
    city_id: Optional[str] = None
    images: Optional[List[str]] = None


class CommentBody(BaseModel):
    user_id: str
    content: str = Field(..., min_length=1)


class CommentCreate(CommentBody):
    post_id: str


class RatingCreate(BaseModel):
    user_id: str
    score: int


class FollowCreate(BaseModel):
    follower_id: str


class CompanionRequestCreate(BaseModel):
    user_id: str
    destination_place_id: Optional[str] = None
    destination_city_id: Optional[str] = None
    travel_date: date
    description: str = Field(..., min_length=1)
    conditions: List[str] = Field(default_factory=list)


class CompanionMatchBody(BaseModel):
    companion_user_id: str
    message: Optional[str] = None


class CompanionMatchCreate(CompanionMatchBody):
    request_id: str


class StatusUpdate(BaseModel):
    status: str


class ProfileUpdate(BaseModel):
    bio: Optional[str] = None
    cover_image: Optional[str] = None
    interests: Optional[List[str]] = None
