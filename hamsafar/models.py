import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)

from hamsafar.database import Base, ViewBase


def _uuid():
    return str(uuid.uuid4())


def _now():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    user_id = Column(String, primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)
    profile_image = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)
    user_type = Column(String, default="regular", nullable=False)


class RegularUser(Base):
    __tablename__ = "regular_users"

    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    experience_level = Column(String, default="beginner", nullable=False)


class Moderator(Base):
    __tablename__ = "moderators"

    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    access_level = Column(String, default="limited", nullable=False)


class Admin(Base):
    __tablename__ = "admins"

    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    access_level = Column(String, default="full", nullable=False)


class Profile(Base):
    __tablename__ = "profiles"

    profile_id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False)
    bio = Column(Text, nullable=True)
    cover_image = Column(String, nullable=True)


class ProfileInterest(Base):
    __tablename__ = "profile_interests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(String, ForeignKey("profiles.profile_id", ondelete="CASCADE"), index=True, nullable=False)
    interest = Column(String, nullable=False)


class City(Base):
    __tablename__ = "cities"

    city_id = Column(String, primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    province = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String, nullable=True)


class Place(Base):
    __tablename__ = "places"

    place_id = Column(String, primary_key=True, default=_uuid)
    city_id = Column(String, ForeignKey("cities.city_id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    map_url = Column(String, nullable=True)


class PlaceFeature(Base):
    __tablename__ = "place_features"

    id = Column(Integer, primary_key=True, autoincrement=True)
    place_id = Column(String, ForeignKey("places.place_id", ondelete="CASCADE"), index=True, nullable=False)
    feature = Column(String, nullable=False)


class PlaceImage(Base):
    __tablename__ = "place_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    place_id = Column(String, ForeignKey("places.place_id", ondelete="CASCADE"), index=True, nullable=False)
    image_url = Column(String, nullable=False)


class Post(Base):
    __tablename__ = "posts"

    post_id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), index=True, nullable=False)
    place_id = Column(String, ForeignKey("places.place_id", ondelete="SET NULL"), nullable=True)
    city_id = Column(String, ForeignKey("cities.city_id", ondelete="SET NULL"), nullable=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    experience_type = Column(String, nullable=False)
    approval_status = Column(String, default="pending", nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, index=True, nullable=False)


class PostImage(Base):
    __tablename__ = "post_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(String, ForeignKey("posts.post_id", ondelete="CASCADE"), index=True, nullable=False)
    image_url = Column(String, nullable=False)


class Comment(Base):
    __tablename__ = "comments"

    comment_id = Column(String, primary_key=True, default=_uuid)
    post_id = Column(String, ForeignKey("posts.post_id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)


class Rating(Base):
    __tablename__ = "ratings"

    # Composite primary key: one rating per user per post
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    post_id = Column(String, ForeignKey("posts.post_id", ondelete="CASCADE"), primary_key=True)
    score = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    __table_args__ = (
        CheckConstraint("score BETWEEN 1 AND 5", name="ck_rating_score_range"),
    )


class Follow(Base):
    __tablename__ = "follows"

    follower_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    following_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    __table_args__ = (
        CheckConstraint("follower_id != following_id", name="ck_no_self_follow"),
    )


class CompanionRequest(Base):
    __tablename__ = "companion_requests"

    request_id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), index=True, nullable=False)
    destination_place_id = Column(String, ForeignKey("places.place_id", ondelete="SET NULL"), nullable=True)
    destination_city_id = Column(String, ForeignKey("cities.city_id", ondelete="SET NULL"), nullable=True)
    travel_date = Column(Date, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String, default="active", nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)


class RequestCondition(Base):
    __tablename__ = "request_conditions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(String, ForeignKey("companion_requests.request_id", ondelete="CASCADE"), index=True, nullable=False)
    condition = Column(String, nullable=False)


class CompanionMatch(Base):
    __tablename__ = "companion_matches"

    match_id = Column(String, primary_key=True, default=_uuid)
    request_id = Column(String, ForeignKey("companion_requests.request_id", ondelete="CASCADE"), index=True, nullable=False)
    companion_user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    status = Column(String, default="pending", nullable=False)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)


class PostWithRating(ViewBase):
    """posts joined with the average and count of their ratings."""

    __tablename__ = "posts_with_rating"

    post_id = Column(String, primary_key=True)
    user_id = Column(String)
    place_id = Column(String)
    city_id = Column(String)
    title = Column(String)
    content = Column(Text)
    experience_type = Column(String)
    approval_status = Column(String)
    created_at = Column(DateTime(timezone=True))
    avg_rating = Column(Float)
    rating_count = Column(Integer)


class ProfileWithCounts(ViewBase):
    """profiles joined with follower and following counts."""

    __tablename__ = "profiles_with_counts"

    profile_id = Column(String, primary_key=True)
    user_id = Column(String)
    bio = Column(Text)
    cover_image = Column(String)
    followers_count = Column(Integer)
    following_count = Column(Integer)


TABLES = {
    model.__tablename__: model
    for model in (
        User, RegularUser, Moderator, Admin, Profile, ProfileInterest,
        City, Place, PlaceFeature, PlaceImage, Post, PostImage, Comment,
        Rating, Follow, CompanionRequest, RequestCondition, CompanionMatch,
        PostWithRating, ProfileWithCounts,
    )
}
