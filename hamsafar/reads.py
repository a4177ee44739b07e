"""
Read accessor.

Fetches entities from the active data store and assembles view models:
multi-valued children (images, interests, features, conditions) are fetched
once per parent and attached in order, and derived numbers (ratings, follow
counts) are taken from the store's views as-is.

Absence is never an error: single lookups return ``None`` and collection
lookups return ``[]``. A failing data source raises ``DataSourceError`` so a
transient outage is never mistaken for "no data".
"""

import functools
import logging
from typing import List, Optional
from urllib.parse import urlparse

from hamsafar.config import settings
from hamsafar.errors import DataSourceError
from hamsafar.schemas import (
    Admin,
    City,
    Comment,
    CompanionMatch,
    CompanionRequest,
    Follow,
    Moderator,
    Place,
    Post,
    Profile,
    RegularUser,
    User,
)
from hamsafar.store import get_store

logger = logging.getLogger(__name__)


def _logged(action):
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DataSourceError as exc:
                logger.error("Error %s: %s", action, exc)
                raise
        return wrapper
    return decorator


def _first(rows):
    return rows[0] if rows else None


def _values(table, column, **filters):
    return [row[column] for row in get_store().select(table, filters)]


def is_placeholder_image(url):
    if not url:
        return False
    host = (urlparse(url).hostname or "").lower()
    return any(host == known or host.endswith("." + known) for known in settings.PLACEHOLDER_IMAGE_HOSTS)


# Users

@_logged("fetching users")
def get_users() -> List[User]:
    return [User(**row) for row in get_store().select("users")]


@_logged("fetching user")
def get_user_by_id(user_id: str) -> Optional[User]:
    row = _first(get_store().select("users", {"user_id": user_id}))
    return User(**row) if row else None


def _subtypes(table, model):
    users = {row["user_id"]: row for row in get_store().select("users")}
    subtypes = []
    for row in get_store().select(table):
        user = users.get(row["user_id"])
        if user is not None:
            subtypes.append(model(**{**user, **row}))
    return subtypes


@_logged("fetching regular users")
def get_regular_users() -> List[RegularUser]:
    return _subtypes("regular_users", RegularUser)


@_logged("fetching moderators")
def get_moderators() -> List[Moderator]:
    return _subtypes("moderators", Moderator)


@_logged("fetching admins")
def get_admins() -> List[Admin]:
    return _subtypes("admins", Admin)


# Profiles

def _profile(row):
    return Profile(**row, interests=_values("profile_interests", "interest", profile_id=row["profile_id"]))


@_logged("fetching profiles")
def get_profiles() -> List[Profile]:
    return [_profile(row) for row in get_store().select("profiles_with_counts")]


@_logged("fetching profile")
def get_profile_by_user_id(user_id: str) -> Optional[Profile]:
    row = _first(get_store().select("profiles_with_counts", {"user_id": user_id}))
    return _profile(row) if row else None


# Cities and places

@_logged("fetching cities")
def get_cities() -> List[City]:
    return [City(**row) for row in get_store().select("cities") if not is_placeholder_image(row.get("image"))]


@_logged("fetching city")
def get_city_by_id(city_id: str) -> Optional[City]:
    row = _first(get_store().select("cities", {"city_id": city_id}))
    return City(**row) if row else None


def _place(row):
    return Place(
        **row,
        features=_values("place_features", "feature", place_id=row["place_id"]),
        images=_values("place_images", "image_url", place_id=row["place_id"]),
    )


@_logged("fetching places")
def get_places() -> List[Place]:
    return [_place(row) for row in get_store().select("places")]


@_logged("fetching place")
def get_place_by_id(place_id: str) -> Optional[Place]:
    row = _first(get_store().select("places", {"place_id": place_id}))
    return _place(row) if row else None


@_logged("fetching places by city")
def get_places_by_city_id(city_id: str) -> List[Place]:
    return [_place(row) for row in get_store().select("places", {"city_id": city_id})]


# Posts and comments

def _post(row):
    return Post(**row, images=_values("post_images", "image_url", post_id=row["post_id"]))


@_logged("fetching posts")
def get_posts() -> List[Post]:
    rows = get_store().select("posts_with_rating", order_by="created_at", descending=True)
    return [_post(row) for row in rows]


@_logged("fetching post")
def get_post_by_id(post_id: str) -> Optional[Post]:
    row = _first(get_store().select("posts_with_rating", {"post_id": post_id}))
    return _post(row) if row else None


@_logged("fetching posts by user")
def get_posts_by_user_id(user_id: str) -> List[Post]:
    rows = get_store().select("posts_with_rating", {"user_id": user_id}, order_by="created_at", descending=True)
    return [_post(row) for row in rows]


@_logged("fetching comments")
def get_comments_by_post_id(post_id: str) -> List[Comment]:
    rows = get_store().select("comments", {"post_id": post_id}, order_by="created_at")
    return [Comment(**row) for row in rows]


# Companions

def _request(row):
    return CompanionRequest(**row, conditions=_values("request_conditions", "condition", request_id=row["request_id"]))


@_logged("fetching companion requests")
def get_companion_requests() -> List[CompanionRequest]:
    rows = get_store().select("companion_requests", order_by="created_at", descending=True)
    return [_request(row) for row in rows]


@_logged("fetching companion request")
def get_companion_request_by_id(request_id: str) -> Optional[CompanionRequest]:
    row = _first(get_store().select("companion_requests", {"request_id": request_id}))
    return _request(row) if row else None


@_logged("fetching companion matches")
def get_companion_matches() -> List[CompanionMatch]:
    return [CompanionMatch(**row) for row in get_store().select("companion_matches")]


@_logged("fetching companion match")
def get_companion_match_by_id(match_id: str) -> Optional[CompanionMatch]:
    row = _first(get_store().select("companion_matches", {"match_id": match_id}))
    return CompanionMatch(**row) if row else None


@_logged("fetching matches for request")
def get_matches_by_request_id(request_id: str) -> List[CompanionMatch]:
    rows = get_store().select("companion_matches", {"request_id": request_id}, order_by="created_at")
    return [CompanionMatch(**row) for row in rows]


# Follows

@_logged("fetching follows")
def get_follows() -> List[Follow]:
    return [Follow(**row) for row in get_store().select("follows")]


@_logged("fetching followers")
def get_followers(user_id: str) -> List[Follow]:
    return [Follow(**row) for row in get_store().select("follows", {"following_id": user_id})]


@_logged("fetching following")
def get_following(user_id: str) -> List[Follow]:
    return [Follow(**row) for row in get_store().select("follows", {"follower_id": user_id})]
