"""
Write accessor.

Creates, updates and deletes entities in the active data store and enforces
the rules the store does not: forced initial statuses, no self-follow,
follow idempotence and rating upserts. Every operation returns a ``Result``;
expected failures are reported in its error slot and logged, never raised.

Parent rows are always written before their children. There is no
transaction around the two steps: if the child insert fails the parent stays
and the failure is reported.
"""

import logging

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from hamsafar.errors import DataSourceError, UniqueViolation, ValidationError
from hamsafar.results import Result
from hamsafar.schemas import (
    ApprovalStatus,
    Comment,
    CommentCreate,
    CompanionMatch,
    CompanionMatchCreate,
    CompanionRequest,
    CompanionRequestCreate,
    Follow,
    MatchStatus,
    Post,
    PostCreate,
    PostUpdate,
    ProfileUpdate,
    Rating,
    RequestStatus,
)
from hamsafar.store import get_store

logger = logging.getLogger(__name__)

SELF_FOLLOW_MESSAGE = "Cannot follow yourself"
MIN_SCORE = 1
MAX_SCORE = 5


def _failure(action, error):
    logger.error("Error %s: %s", action, error)
    return Result.failure(error)


def _parse(model, data):
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    return model.model_validate(data)


def _replace_children(store, table, parent_column, parent_id, value_column, values):
    store.delete(table, {parent_column: parent_id})
    if values:
        store.insert(table, [{parent_column: parent_id, value_column: value} for value in values])


# Posts

def create_post(data) -> Result:
    """Create a post awaiting moderation, then its image rows."""
    try:
        data = _parse(PostCreate, data)
    except SchemaError as exc:
        return _failure("creating post", ValidationError(str(exc)))

    store = get_store()
    try:
        row = store.insert("posts", [{
            "user_id": data.user_id,
            "place_id": data.place_id or None,
            "city_id": data.city_id or None,
            "title": data.title,
            "content": data.content,
            "experience_type": data.experience_type.value,
            "approval_status": ApprovalStatus.pending.value,
        }])[0]
        if data.images:
            store.insert("post_images", [{"post_id": row["post_id"], "image_url": url} for url in data.images])
    except DataSourceError as exc:
        return _failure("creating post", exc)

    return Result.success(Post(**row, images=list(data.images), avg_rating=0, rating_count=0))


def update_post(post_id: str, data) -> Result:
    """Update the supplied fields; a supplied image list replaces the old one entirely."""
    try:
        data = _parse(PostUpdate, data)
    except SchemaError as exc:
        return _failure("updating post", ValidationError(str(exc)))

    values = data.model_dump(exclude_unset=True, exclude={"images"}, mode="json")
    for column in ("place_id", "city_id"):
        if column in values:
            values[column] = values[column] or None
    values = {
        column: value for column, value in values.items()
        if value is not None or column in ("place_id", "city_id")
    }

    store = get_store()
    try:
        if values:
            store.update("posts", values, {"post_id": post_id})
        if data.images is not None:
            _replace_children(store, "post_images", "post_id", post_id, "image_url", data.images)
    except DataSourceError as exc:
        return _failure("updating post", exc)
    return Result.success()


def delete_post(post_id: str) -> Result:
    # Images, comments and ratings are removed by the store's cascade
    try:
        get_store().delete("posts", {"post_id": post_id})
    except DataSourceError as exc:
        return _failure("deleting post", exc)
    return Result.success()


# Comments

def create_comment(data) -> Result:
    try:
        data = _parse(CommentCreate, data)
    except SchemaError as exc:
        return _failure("creating comment", ValidationError(str(exc)))

    try:
        row = get_store().insert("comments", [{
            "post_id": data.post_id,
            "user_id": data.user_id,
            "content": data.content,
        }])[0]
    except DataSourceError as exc:
        return _failure("creating comment", exc)
    return Result.success(Comment(**row))


def delete_comment(comment_id: str) -> Result:
    try:
        get_store().delete("comments", {"comment_id": comment_id})
    except DataSourceError as exc:
        return _failure("deleting comment", exc)
    return Result.success()


# Ratings

def create_or_update_rating(user_id: str, post_id: str, score: int) -> Result:
    """Rate a post; rating it again overwrites the earlier score."""
    if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
        return _failure(
            "creating/updating rating",
            ValidationError(f"Score must be an integer between {MIN_SCORE} and {MAX_SCORE}"),
        )

    try:
        row = get_store().upsert(
            "ratings",
            {"user_id": user_id, "post_id": post_id, "score": score},
            conflict=("user_id", "post_id"),
        )
    except DataSourceError as exc:
        return _failure("creating/updating rating", exc)
    return Result.success(Rating(**row))


# Follows

def follow_user(follower_id: str, following_id: str) -> Result:
    """Follow a user. Following someone already followed is a no-op success."""
    if follower_id == following_id:
        return Result.failure(ValidationError(SELF_FOLLOW_MESSAGE))

    pair = {"follower_id": follower_id, "following_id": following_id}
    store = get_store()
    try:
        try:
            row = store.insert("follows", [pair])[0]
        except UniqueViolation as exc:
            logger.info("User %s already follows %s", follower_id, following_id)
            existing = store.select("follows", pair)
            if not existing:
                # The conflicting row vanished between the insert and the re-read
                return _failure("following user", exc)
            row = existing[0]
    except DataSourceError as exc:
        return _failure("following user", exc)
    return Result.success(Follow(**row))


def unfollow_user(follower_id: str, following_id: str) -> Result:
    try:
        get_store().delete("follows", {"follower_id": follower_id, "following_id": following_id})
    except DataSourceError as exc:
        return _failure("unfollowing user", exc)
    return Result.success()


def is_following(follower_id: str, following_id: str) -> Result:
    try:
        rows = get_store().select("follows", {"follower_id": follower_id, "following_id": following_id})
    except DataSourceError as exc:
        return _failure("checking follow status", exc)
    return Result.success(bool(rows))


# Companion requests and matches

def create_companion_request(data) -> Result:
    """Create an active companion request, then its condition rows."""
    try:
        data = _parse(CompanionRequestCreate, data)
    except SchemaError as exc:
        return _failure("creating companion request", ValidationError(str(exc)))

    store = get_store()
    try:
        row = store.insert("companion_requests", [{
            "user_id": data.user_id,
            "destination_place_id": data.destination_place_id or None,
            "destination_city_id": data.destination_city_id or None,
            "travel_date": data.travel_date,
            "description": data.description,
            "status": RequestStatus.active.value,
        }])[0]
        if data.conditions:
            store.insert("request_conditions", [
                {"request_id": row["request_id"], "condition": condition} for condition in data.conditions
            ])
    except DataSourceError as exc:
        return _failure("creating companion request", exc)

    return Result.success(CompanionRequest(**row, conditions=list(data.conditions)))


def _update_status(table, key_column, key, status_enum, status, action):
    # Any valid status may follow any other; only unknown values are rejected
    try:
        status = status_enum(status)
    except ValueError:
        allowed = ", ".join(member.value for member in status_enum)
        return _failure(action, ValidationError(f"Invalid status {status!r}; expected one of: {allowed}"))

    try:
        get_store().update(table, {"status": status.value}, {key_column: key})
    except DataSourceError as exc:
        return _failure(action, exc)
    return Result.success()


def update_companion_request_status(request_id: str, status) -> Result:
    return _update_status(
        "companion_requests", "request_id", request_id, RequestStatus, status, "updating request status",
    )


def create_companion_match(data) -> Result:
    try:
        data = _parse(CompanionMatchCreate, data)
    except SchemaError as exc:
        return _failure("creating companion match", ValidationError(str(exc)))

    try:
        row = get_store().insert("companion_matches", [{
            "request_id": data.request_id,
            "companion_user_id": data.companion_user_id,
            "message": data.message,
            "status": MatchStatus.pending.value,
        }])[0]
    except DataSourceError as exc:
        return _failure("creating companion match", exc)
    return Result.success(CompanionMatch(**row))


def update_companion_match_status(match_id: str, status) -> Result:
    return _update_status(
        "companion_matches", "match_id", match_id, MatchStatus, status, "updating match status",
    )


# Profiles

def update_profile(user_id: str, profile_id: str, data) -> Result:
    """Update bio and cover image; a supplied interest list replaces the old one entirely."""
    try:
        data = _parse(ProfileUpdate, data)
    except SchemaError as exc:
        return _failure("updating profile", ValidationError(str(exc)))

    values = data.model_dump(exclude_unset=True, include={"bio", "cover_image"})
    store = get_store()
    try:
        if values:
            store.update("profiles", values, {"user_id": user_id})
        if data.interests is not None:
            _replace_children(store, "profile_interests", "profile_id", profile_id, "interest", data.interests)
    except DataSourceError as exc:
        return _failure("updating profile", exc)
    return Result.success()
