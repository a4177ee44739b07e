from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from hamsafar import reads, writes
from hamsafar.config import settings
from hamsafar.errors import DataSourceError, ValidationError
from hamsafar.logging_config import configure_logging
from hamsafar.schemas import (
    CommentBody,
    CommentCreate,
    CompanionMatchBody,
    CompanionMatchCreate,
    CompanionRequestCreate,
    FollowCreate,
    PostCreate,
    PostUpdate,
    ProfileUpdate,
    RatingCreate,
    StatusUpdate,
    UserType,
)
from hamsafar.store import get_store

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME)


@app.exception_handler(DataSourceError)
def data_source_error_handler(request: Request, exc: DataSourceError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Data source unavailable"},
    )


@app.exception_handler(ValidationError)
def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


def unwrap(result):
    # Both error types are mapped to responses by the handlers above
    value, error = result
    if error is not None:
        raise error
    return value


def found(entity, name):
    if entity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{name} not found")
    return entity


@app.get("/health", tags=['Health'])
def health():
    return {"status": "ok", "data_source": get_store().name}


# Users

@app.get("/users", tags=['Users'])
def list_users(user_type: Optional[UserType] = None):
    users = reads.get_users()
    if user_type is not None:
        users = [user for user in users if user.user_type == user_type]
    return users


@app.get("/regular-users", tags=['Users'])
def list_regular_users():
    return reads.get_regular_users()


@app.get("/moderators", tags=['Users'])
def list_moderators():
    return reads.get_moderators()


@app.get("/admins", tags=['Users'])
def list_admins():
    return reads.get_admins()


@app.get("/users/{user_id}", tags=['Users'])
def get_user(user_id: str):
    return found(reads.get_user_by_id(user_id), "User")


@app.get("/profiles", tags=['Profiles'])
def list_profiles():
    return reads.get_profiles()


@app.get("/users/{user_id}/profile", tags=['Profiles'])
def get_profile(user_id: str):
    return found(reads.get_profile_by_user_id(user_id), "Profile")


@app.patch("/users/{user_id}/profile", tags=['Profiles'])
def update_profile(user_id: str, data: ProfileUpdate):
    profile = found(reads.get_profile_by_user_id(user_id), "Profile")
    unwrap(writes.update_profile(user_id, profile.profile_id, data))
    return reads.get_profile_by_user_id(user_id)


@app.get("/users/{user_id}/posts", tags=['Posts'])
def list_user_posts(user_id: str):
    return reads.get_posts_by_user_id(user_id)


# Follows

@app.get("/users/{user_id}/followers", tags=['Follow & Unfollow'])
def list_followers(user_id: str):
    return reads.get_followers(user_id)


@app.get("/users/{user_id}/following", tags=['Follow & Unfollow'])
def list_following(user_id: str):
    return reads.get_following(user_id)


@app.post("/users/{user_id}/follow", tags=['Follow & Unfollow'])
def follow_user(user_id: str, data: FollowCreate):
    return unwrap(writes.follow_user(data.follower_id, user_id))


@app.delete("/users/{user_id}/follow/{follower_id}", tags=['Follow & Unfollow'])
def unfollow_user(user_id: str, follower_id: str):
    unwrap(writes.unfollow_user(follower_id, user_id))
    return {"message": "Unfollowed"}


@app.get("/users/{user_id}/follow/{follower_id}", tags=['Follow & Unfollow'])
def check_following(user_id: str, follower_id: str):
    return {"following": unwrap(writes.is_following(follower_id, user_id))}


# Cities and places

@app.get("/cities", tags=['Places'])
def list_cities():
    return reads.get_cities()


@app.get("/cities/{city_id}", tags=['Places'])
def get_city(city_id: str):
    return found(reads.get_city_by_id(city_id), "City")


@app.get("/cities/{city_id}/places", tags=['Places'])
def list_city_places(city_id: str):
    return reads.get_places_by_city_id(city_id)


@app.get("/places", tags=['Places'])
def list_places():
    return reads.get_places()


@app.get("/places/{place_id}", tags=['Places'])
def get_place(place_id: str):
    return found(reads.get_place_by_id(place_id), "Place")


# Posts

@app.get("/posts", tags=['Posts'])
def list_posts():
    return reads.get_posts()


@app.post("/posts", tags=['Posts'])
def create_post(data: PostCreate):
    return unwrap(writes.create_post(data))


@app.get("/posts/{post_id}", tags=['Posts'])
def get_post(post_id: str):
    return found(reads.get_post_by_id(post_id), "Post")


@app.patch("/posts/{post_id}", tags=['Posts'])
def update_post(post_id: str, data: PostUpdate):
    found(reads.get_post_by_id(post_id), "Post")
    unwrap(writes.update_post(post_id, data))
    return reads.get_post_by_id(post_id)


@app.delete("/posts/{post_id}", tags=['Posts'])
def delete_post(post_id: str):
    found(reads.get_post_by_id(post_id), "Post")
    unwrap(writes.delete_post(post_id))
    return {"message": "Post deleted"}


# Comments & ratings

@app.get("/posts/{post_id}/comments", tags=['Comments & Ratings'])
def list_comments(post_id: str):
    return reads.get_comments_by_post_id(post_id)


@app.post("/posts/{post_id}/comments", tags=['Comments & Ratings'])
def create_comment(post_id: str, data: CommentBody):
    found(reads.get_post_by_id(post_id), "Post")
    return unwrap(writes.create_comment(CommentCreate(post_id=post_id, **data.model_dump())))


@app.delete("/comments/{comment_id}", tags=['Comments & Ratings'])
def delete_comment(comment_id: str):
    unwrap(writes.delete_comment(comment_id))
    return {"message": "Comment deleted"}


@app.put("/posts/{post_id}/rating", tags=['Comments & Ratings'])
def rate_post(post_id: str, data: RatingCreate):
    found(reads.get_post_by_id(post_id), "Post")
    return unwrap(writes.create_or_update_rating(data.user_id, post_id, data.score))


# Companions

@app.get("/companion-requests", tags=['Companions'])
def list_companion_requests():
    return reads.get_companion_requests()


@app.post("/companion-requests", tags=['Companions'])
def create_companion_request(data: CompanionRequestCreate):
    return unwrap(writes.create_companion_request(data))


@app.get("/companion-requests/{request_id}", tags=['Companions'])
def get_companion_request(request_id: str):
    return found(reads.get_companion_request_by_id(request_id), "Companion request")


@app.patch("/companion-requests/{request_id}/status", tags=['Companions'])
def update_companion_request_status(request_id: str, data: StatusUpdate):
    found(reads.get_companion_request_by_id(request_id), "Companion request")
    unwrap(writes.update_companion_request_status(request_id, data.status))
    return reads.get_companion_request_by_id(request_id)


@app.get("/companion-requests/{request_id}/matches", tags=['Companions'])
def list_request_matches(request_id: str):
    return reads.get_matches_by_request_id(request_id)


@app.post("/companion-requests/{request_id}/matches", tags=['Companions'])
def create_companion_match(request_id: str, data: CompanionMatchBody):
    found(reads.get_companion_request_by_id(request_id), "Companion request")
    return unwrap(writes.create_companion_match(CompanionMatchCreate(request_id=request_id, **data.model_dump())))


@app.get("/companion-matches", tags=['Companions'])
def list_companion_matches():
    return reads.get_companion_matches()


@app.patch("/companion-matches/{match_id}/status", tags=['Companions'])
def update_companion_match_status(match_id: str, data: StatusUpdate):
    found(reads.get_companion_match_by_id(match_id), "Companion match")
    unwrap(writes.update_companion_match_status(match_id, data.status))
    return reads.get_companion_match_by_id(match_id)
