import pytest

from hamsafar.errors import FOREIGN_KEY_VIOLATION, UNIQUE_VIOLATION, DataSourceError, UniqueViolation
from hamsafar.mock_store import MockStore


def test_generated_ids_are_unique_and_prefixed(mock_store):
    rows = mock_store.insert("comments", [
        {"post_id": "post-1", "user_id": "user-1", "content": "one"},
        {"post_id": "post-1", "user_id": "user-1", "content": "two"},
    ])
    ids = [row["comment_id"] for row in rows]
    assert len(set(ids)) == 2
    assert all(comment_id.startswith("comment-") for comment_id in ids)
    assert all(row["created_at"] is not None for row in rows)


def test_supplied_ids_are_kept(mock_store):
    row = mock_store.insert("cities", [{"city_id": "city-9", "name": "Yazd", "province": "Yazd"}])[0]
    assert row["city_id"] == "city-9"


def test_child_rows_get_increasing_ids(mock_store):
    rows = mock_store.insert("post_images", [
        {"post_id": "post-3", "image_url": "/a.jpg"},
        {"post_id": "post-3", "image_url": "/b.jpg"},
    ])
    assert rows[1]["id"] == rows[0]["id"] + 1
    assert rows[0]["id"] > max(row["id"] for row in mock_store.select("post_images", {"post_id": "post-1"}))


def test_duplicate_follow_raises_unique_violation(mock_store):
    with pytest.raises(UniqueViolation) as excinfo:
        mock_store.insert("follows", [{"follower_id": "user-1", "following_id": "user-2"}])
    assert excinfo.value.code == UNIQUE_VIOLATION
    assert len(mock_store.select("follows")) == 5


def test_insert_is_all_or_nothing(mock_store):
    with pytest.raises(UniqueViolation):
        mock_store.insert("follows", [
            {"follower_id": "user-5", "following_id": "user-6"},
            {"follower_id": "user-5", "following_id": "user-6"},
        ])
    assert mock_store.select("follows", {"follower_id": "user-5"}) == []


def test_delete_cascades(mock_store):
    assert mock_store.delete("users", {"user_id": "user-1"}) == 1
    assert mock_store.select("posts", {"user_id": "user-1"}) == []
    # Comments on user-1's posts go with the posts
    assert mock_store.select("comments", {"post_id": "post-1"}) == []
    assert mock_store.select("follows", {"following_id": "user-1"}) == []
    assert mock_store.select("profile_interests", {"profile_id": "profile-1"}) == []


def test_delete_without_match(mock_store):
    assert mock_store.delete("posts", {"post_id": "missing"}) == 0


def test_update_returns_count(mock_store):
    assert mock_store.update("posts", {"approval_status": "approved"}, {"user_id": "user-1"}) == 2


def test_upsert(mock_store):
    row = mock_store.upsert("ratings", {"user_id": "user-2", "post_id": "post-1", "score": 1}, ("user_id", "post_id"))
    assert row["score"] == 1
    assert len(mock_store.select("ratings", {"post_id": "post-1"})) == 2

    row = mock_store.upsert("ratings", {"user_id": "user-6", "post_id": "post-1", "score": 2}, ("user_id", "post_id"))
    assert row["created_at"] is not None
    assert len(mock_store.select("ratings", {"post_id": "post-1"})) == 3


def test_views_are_computed_on_read(mock_store):
    post = mock_store.select("posts_with_rating", {"post_id": "post-1"})[0]
    assert post["avg_rating"] == 4.5
    assert post["rating_count"] == 2

    mock_store.delete("ratings", {"post_id": "post-1"})
    post = mock_store.select("posts_with_rating", {"post_id": "post-1"})[0]
    assert post["avg_rating"] == 0
    assert post["rating_count"] == 0

    profile = mock_store.select("profiles_with_counts", {"user_id": "user-1"})[0]
    assert (profile["followers_count"], profile["following_count"]) == (2, 2)


def test_select_returns_copies(mock_store):
    row = mock_store.select("posts", {"post_id": "post-1"})[0]
    row["title"] = "changed"
    assert mock_store.select("posts", {"post_id": "post-1"})[0]["title"] != "changed"


def test_unknown_table(mock_store):
    with pytest.raises(DataSourceError):
        mock_store.select("bookmarks")


def test_stores_do_not_share_state():
    first = MockStore()
    first.delete("posts", {"post_id": "post-1"})
    assert len(MockStore().select("posts")) == 5


def test_custom_seed():
    store = MockStore(seed={"users": []})
    assert store.select("users") == []
    assert store.select("posts") == []


def test_insert_with_missing_parent_is_rejected(mock_store):
    with pytest.raises(DataSourceError) as excinfo:
        mock_store.insert("comments", [{"post_id": "no-such-post", "user_id": "user-1", "content": "Hi"}])
    assert excinfo.value.code == FOREIGN_KEY_VIOLATION
    assert mock_store.select("comments", {"post_id": "no-such-post"}) == []


def test_nullable_reference_may_be_empty(mock_store):
    row = mock_store.insert("posts", [{
        "user_id": "user-1",
        "place_id": None,
        "city_id": None,
        "title": "Somewhere",
        "content": "Anywhere",
        "experience_type": "imagined",
        "approval_status": "pending",
    }])[0]
    assert row["place_id"] is None


def test_update_with_missing_parent_is_rejected(mock_store):
    with pytest.raises(DataSourceError):
        mock_store.update("posts", {"place_id": "no-such-place"}, {"post_id": "post-1"})
    assert mock_store.select("posts", {"post_id": "post-1"})[0]["place_id"] == "place-1"


def test_delete_sets_optional_references_to_null(mock_store):
    mock_store.delete("cities", {"city_id": "city-1"})
    post = mock_store.select("posts", {"post_id": "post-4"})[0]
    assert post["city_id"] is None
    # Golestan Palace was in Tehran, so the place reference goes too
    assert post["place_id"] is None
    assert mock_store.select("places", {"city_id": "city-1"}) == []
