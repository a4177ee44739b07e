import pytest

from hamsafar import reads
from hamsafar.errors import DataSourceError


def test_get_users_returns_all_users(store):
    users = reads.get_users()
    assert len(users) == 6
    assert {user.user_type.value for user in users} == {"regular", "moderator", "admin"}


def test_get_user_by_id(store):
    assert reads.get_user_by_id("user-1").username == "ali_ahmadi"
    assert reads.get_user_by_id("non-existent-user") is None


def test_user_subtypes(store):
    regular = reads.get_regular_users()
    assert {user.user_id for user in regular} == {"user-1", "user-2", "user-3", "user-4"}
    assert next(u for u in regular if u.user_id == "user-3").experience_level.value == "expert"

    moderators = reads.get_moderators()
    assert [(m.user_id, m.access_level.value) for m in moderators] == [("user-5", "standard")]
    assert [a.user_id for a in reads.get_admins()] == ["user-6"]


def test_every_user_has_exactly_one_profile(store):
    profile_user_ids = [profile.user_id for profile in reads.get_profiles()]
    for user in reads.get_users():
        assert profile_user_ids.count(user.user_id) == 1


def test_profile_includes_counts_and_interests(store):
    profile = reads.get_profile_by_user_id("user-1")
    assert profile.followers_count == 2
    assert profile.following_count == 2
    assert profile.interests == ["Hiking", "Photography", "Nature"]

    assert reads.get_profile_by_user_id("user-6").interests == []
    assert reads.get_profile_by_user_id("non-existent-user") is None


def test_get_cities_drops_placeholder_images(store):
    cities = reads.get_cities()
    assert [city.city_id for city in cities] == ["city-1", "city-2", "city-3"]
    assert all("placehold.co" not in (city.image or "") for city in cities)
    # Direct lookups are not filtered
    assert reads.get_city_by_id("city-4").name == "Tabriz"


def test_places_include_features_and_images(store):
    place = reads.get_place_by_id("place-1")
    assert place.features == ["Historic", "Bazaar", "Wheelchair access"]
    assert place.images == ["/images/place_naqsh_1.jpg", "/images/place_naqsh_2.jpg"]

    bare = reads.get_place_by_id("place-3")
    assert bare.features == []
    assert reads.get_place_by_id("missing") is None


def test_places_reference_existing_cities(store):
    city_ids = {city.city_id for city in reads.get_cities()}
    assert all(place.city_id in city_ids for place in reads.get_places())


def test_get_places_by_city_id(store):
    assert {place.place_id for place in reads.get_places_by_city_id("city-3")} == {"place-2", "place-4"}
    assert reads.get_places_by_city_id("city-4") == []


def test_get_posts_sorted_newest_first(store):
    posts = reads.get_posts()
    assert [post.post_id for post in posts] == ["post-3", "post-5", "post-2", "post-1", "post-4"]
    for newer, older in zip(posts, posts[1:]):
        assert newer.created_at >= older.created_at


def test_posts_include_rating_aggregates_and_images(store):
    post = reads.get_post_by_id("post-1")
    assert post.avg_rating == pytest.approx(4.5)
    assert post.rating_count == 2
    assert post.images == ["/images/post_1_a.jpg", "/images/post_1_b.jpg"]

    unrated = reads.get_post_by_id("post-3")
    assert unrated.avg_rating == 0
    assert unrated.rating_count == 0
    assert unrated.images == []


def test_posts_reference_existing_users(store):
    user_ids = {user.user_id for user in reads.get_users()}
    for post in reads.get_posts():
        assert post.user_id in user_ids
        assert post.approval_status.value in ("pending", "approved", "rejected")
        assert 0 <= post.avg_rating <= 5


def test_get_posts_by_user_id(store):
    posts = reads.get_posts_by_user_id("user-1")
    assert [post.post_id for post in posts] == ["post-1", "post-4"]
    assert reads.get_posts_by_user_id("no-such-user") == []


def test_get_post_by_id_missing(store):
    assert reads.get_post_by_id("non-existent-post-id") is None


def test_get_comments_by_post_id(store):
    comments = reads.get_comments_by_post_id("post-1")
    assert [comment.comment_id for comment in comments] == ["comment-1", "comment-2"]
    assert reads.get_comments_by_post_id("no-such-post") == []


def test_companion_requests_include_conditions(store):
    requests = reads.get_companion_requests()
    assert [request.request_id for request in requests] == ["request-1", "request-2"]
    assert requests[0].conditions == ["Non-smoker", "Early riser"]
    assert reads.get_companion_request_by_id("missing") is None


def test_companion_matches(store):
    assert len(reads.get_companion_matches()) == 2
    assert [match.match_id for match in reads.get_matches_by_request_id("request-1")] == ["match-1"]
    assert reads.get_matches_by_request_id("missing") == []


def test_follows_have_no_self_follow(store):
    user_ids = {user.user_id for user in reads.get_users()}
    follows = reads.get_follows()
    assert len(follows) == 5
    for follow in follows:
        assert follow.follower_id != follow.following_id
        assert {follow.follower_id, follow.following_id} <= user_ids


def test_followers_and_following(store):
    assert {f.follower_id for f in reads.get_followers("user-1")} == {"user-2", "user-3"}
    assert {f.following_id for f in reads.get_following("user-1")} == {"user-2", "user-4"}
    assert reads.get_followers("user-6") == []


def test_read_failure_is_not_an_empty_result(failing_store):
    with pytest.raises(DataSourceError):
        reads.get_posts()
    with pytest.raises(DataSourceError):
        reads.get_post_by_id("post-1")
    with pytest.raises(DataSourceError):
        reads.get_comments_by_post_id("post-1")


@pytest.mark.parametrize("url, expected", [
    ("https://placehold.co/600x400", True),
    ("https://cdn.placehold.co/img.png", True),
    ("https://images.example.com/placehold.co.jpg", False),
    ("/images/city_tehran.jpg", False),
    (None, False),
])
def test_is_placeholder_image(url, expected):
    assert reads.is_placeholder_image(url) is expected


def test_get_companion_match_by_id(store):
    assert reads.get_companion_match_by_id("match-2").status.value == "accepted"
    assert reads.get_companion_match_by_id("missing") is None


def test_subtype_read_failure_is_logged_once(failing_store, caplog):
    with pytest.raises(DataSourceError):
        reads.get_moderators()
    errors = [record for record in caplog.records if record.levelname == "ERROR"]
    assert [record.getMessage() for record in errors] == ["Error fetching moderators: connection refused"]
