from datetime import date, datetime

# Placeholder artwork; cities using it are dropped from city listings
PLACEHOLDER_IMAGE = "https://placehold.co/600x400?text=City"


def _ts(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _children(column, value_column, items):
    rows = []
    for parent_id, values in items:
        rows.extend({column: parent_id, value_column: value} for value in values)
    return [dict(row, id=index) for index, row in enumerate(rows, start=1)]


def users():
    return [
        {
            "user_id": "user-1",
            "name": "Ali Ahmadi",
            "username": "ali_ahmadi",
            "email": "ali@example.com",
            "phone": "09121234567",
            "profile_image": "/images/avatar_user_1.png",
            "created_at": _ts("2024-01-15T10:30:00Z"),
            "user_type": "regular",
        },
        {
            "user_id": "user-2",
            "name": "Sara Mohammadi",
            "username": "sara_m",
            "email": "sara@example.com",
            "phone": "09129876543",
            "profile_image": "/images/avatar_user_2.png",
            "created_at": _ts("2024-02-03T08:15:00Z"),
            "user_type": "regular",
        },
        {
            "user_id": "user-3",
            "name": "Reza Karimi",
            "username": "reza_k",
            "email": "reza@example.com",
            "phone": None,
            "profile_image": "/images/avatar_user_3.png",
            "created_at": _ts("2024-02-20T17:45:00Z"),
            "user_type": "regular",
        },
        {
            "user_id": "user-4",
            "name": "Maryam Hosseini",
            "username": "maryam_h",
            "email": "maryam@example.com",
            "phone": "09351112233",
            "profile_image": None,
            "created_at": _ts("2024-03-11T12:00:00Z"),
            "user_type": "regular",
        },
        {
            "user_id": "user-5",
            "name": "Hamid Rezaei",
            "username": "hamid_mod",
            "email": "hamid@example.com",
            "phone": None,
            "profile_image": "/images/avatar_user_5.png",
            "created_at": _ts("2023-11-01T09:00:00Z"),
            "user_type": "moderator",
        },
        {
            "user_id": "user-6",
            "name": "Neda Jafari",
            "username": "neda_admin",
            "email": "neda@example.com",
            "phone": None,
            "profile_image": None,
            "created_at": _ts("2023-10-01T09:00:00Z"),
            "user_type": "admin",
        },
    ]


def profiles():
    bios = {
        "user-1": "Travel and nature lover.",
        "user-2": "Photographer chasing old bazaars.",
        "user-3": "Desert nights and mountain mornings.",
        "user-4": None,
        "user-5": "Keeping the community friendly.",
        "user-6": None,
    }
    return [
        {
            "profile_id": f"profile-{user_id.split('-')[1]}",
            "user_id": user_id,
            "bio": bio,
            "cover_image": f"/images/cover_profile_{user_id.split('-')[1]}.png" if bio else None,
        }
        for user_id, bio in bios.items()
    ]


def dataset():
    """Build a fresh copy of the demo dataset, keyed by table name."""
    return {
        "users": users(),
        "regular_users": [
            {"user_id": "user-1", "experience_level": "advanced"},
            {"user_id": "user-2", "experience_level": "intermediate"},
            {"user_id": "user-3", "experience_level": "expert"},
            {"user_id": "user-4", "experience_level": "beginner"},
        ],
        "moderators": [{"user_id": "user-5", "access_level": "standard"}],
        "admins": [{"user_id": "user-6", "access_level": "full"}],
        "profiles": profiles(),
        "profile_interests": _children("profile_id", "interest", [
            ("profile-1", ["Hiking", "Photography", "Nature"]),
            ("profile-2", ["Photography", "History"]),
            ("profile-3", ["Desert", "Camping"]),
            ("profile-5", ["Architecture"]),
        ]),
        "cities": [
            {
                "city_id": "city-1",
                "name": "Tehran",
                "province": "Tehran",
                "description": "Capital city at the foot of the Alborz mountains.",
                "image": "/images/city_tehran.jpg",
            },
            {
                "city_id": "city-2",
                "name": "Isfahan",
                "province": "Isfahan",
                "description": "Half the world, home of Naqsh-e Jahan square.",
                "image": "/images/city_isfahan.jpg",
            },
            {
                "city_id": "city-3",
                "name": "Shiraz",
                "province": "Fars",
                "description": "City of poets and gardens.",
                "image": "/images/city_shiraz.jpg",
            },
            {
                "city_id": "city-4",
                "name": "Tabriz",
                "province": "East Azerbaijan",
                "description": None,
                "image": PLACEHOLDER_IMAGE,
            },
        ],
        "places": [
            {
                "place_id": "place-1",
                "city_id": "city-2",
                "name": "Naqsh-e Jahan Square",
                "description": "One of the largest city squares in the world.",
                "latitude": 32.6575,
                "longitude": 51.6776,
                "map_url": "https://maps.example.com/?q=naqsh-e-jahan",
            },
            {
                "place_id": "place-2",
                "city_id": "city-3",
                "name": "Persepolis",
                "description": "Ceremonial capital of the Achaemenid Empire.",
                "latitude": 29.9355,
                "longitude": 52.8916,
                "map_url": None,
            },
            {
                "place_id": "place-3",
                "city_id": "city-1",
                "name": "Golestan Palace",
                "description": None,
                "latitude": 35.6797,
                "longitude": 51.4203,
                "map_url": None,
            },
            {
                "place_id": "place-4",
                "city_id": "city-3",
                "name": "Eram Garden",
                "description": "Historic Persian garden.",
                "latitude": None,
                "longitude": None,
                "map_url": None,
            },
        ],
        "place_features": _children("place_id", "feature", [
            ("place-1", ["Historic", "Bazaar", "Wheelchair access"]),
            ("place-2", ["Historic", "Guided tours"]),
            ("place-4", ["Garden"]),
        ]),
        "place_images": _children("place_id", "image_url", [
            ("place-1", ["/images/place_naqsh_1.jpg", "/images/place_naqsh_2.jpg"]),
            ("place-2", ["/images/place_persepolis.jpg"]),
            ("place-3", ["/images/place_golestan.jpg"]),
        ]),
        "posts": [
            {
                "post_id": "post-1",
                "user_id": "user-1",
                "place_id": "place-1",
                "city_id": "city-2",
                "title": "Sunset over Naqsh-e Jahan",
                "content": "Walked the square at dusk and ended up in the bazaar until late.",
                "experience_type": "visited",
                "approval_status": "approved",
                "created_at": _ts("2024-04-02T18:20:00Z"),
            },
            {
                "post_id": "post-2",
                "user_id": "user-2",
                "place_id": "place-2",
                "city_id": "city-3",
                "title": "A morning at Persepolis",
                "content": "Arrive early, the light on the columns is worth it.",
                "experience_type": "visited",
                "approval_status": "approved",
                "created_at": _ts("2024-04-10T07:05:00Z"),
            },
            {
                "post_id": "post-3",
                "user_id": "user-3",
                "place_id": None,
                "city_id": "city-3",
                "title": "Dreaming of Shiraz in spring",
                "content": "Orange blossoms and poetry nights, next year for sure.",
                "experience_type": "imagined",
                "approval_status": "pending",
                "created_at": _ts("2024-05-01T21:40:00Z"),
            },
            {
                "post_id": "post-4",
                "user_id": "user-1",
                "place_id": "place-3",
                "city_id": "city-1",
                "title": "Golestan Palace mirror hall",
                "content": "Every surface sparkles, bring a wide lens.",
                "experience_type": "visited",
                "approval_status": "approved",
                "created_at": _ts("2024-03-18T11:30:00Z"),
            },
            {
                "post_id": "post-5",
                "user_id": "user-4",
                "place_id": "place-4",
                "city_id": "city-3",
                "title": "Quiet afternoon in Eram Garden",
                "content": "Shade, cypress trees and tea.",
                "experience_type": "visited",
                "approval_status": "rejected",
                "created_at": _ts("2024-04-25T15:00:00Z"),
            },
        ],
        "post_images": _children("post_id", "image_url", [
            ("post-1", ["/images/post_1_a.jpg", "/images/post_1_b.jpg"]),
            ("post-2", ["/images/post_2.jpg"]),
            ("post-4", ["/images/post_4.jpg"]),
            ("post-5", ["/images/post_5.jpg"]),
        ]),
        "comments": [
            {
                "comment_id": "comment-1",
                "post_id": "post-1",
                "user_id": "user-2",
                "content": "Beautiful photos!",
                "created_at": _ts("2024-04-02T19:00:00Z"),
            },
            {
                "comment_id": "comment-2",
                "post_id": "post-1",
                "user_id": "user-3",
                "content": "Which tea house did you visit?",
                "created_at": _ts("2024-04-03T09:12:00Z"),
            },
            {
                "comment_id": "comment-3",
                "post_id": "post-2",
                "user_id": "user-1",
                "content": "Adding this to my list.",
                "created_at": _ts("2024-04-10T10:00:00Z"),
            },
        ],
        "ratings": [
            {"user_id": "user-2", "post_id": "post-1", "score": 5, "created_at": _ts("2024-04-02T19:01:00Z")},
            {"user_id": "user-3", "post_id": "post-1", "score": 4, "created_at": _ts("2024-04-03T09:13:00Z")},
            {"user_id": "user-1", "post_id": "post-2", "score": 5, "created_at": _ts("2024-04-10T10:01:00Z")},
            {"user_id": "user-4", "post_id": "post-4", "score": 3, "created_at": _ts("2024-03-20T14:00:00Z")},
        ],
        "follows": [
            {"follower_id": "user-1", "following_id": "user-2", "created_at": _ts("2024-02-05T10:00:00Z")},
            {"follower_id": "user-2", "following_id": "user-1", "created_at": _ts("2024-02-06T10:00:00Z")},
            {"follower_id": "user-3", "following_id": "user-1", "created_at": _ts("2024-02-21T10:00:00Z")},
            {"follower_id": "user-1", "following_id": "user-4", "created_at": _ts("2024-03-12T10:00:00Z")},
            {"follower_id": "user-4", "following_id": "user-3", "created_at": _ts("2024-03-13T10:00:00Z")},
        ],
        "companion_requests": [
            {
                "request_id": "request-1",
                "user_id": "user-2",
                "destination_place_id": None,
                "destination_city_id": "city-3",
                "travel_date": date(2025, 4, 10),
                "description": "Looking for someone to explore Shiraz gardens with.",
                "status": "active",
                "created_at": _ts("2024-05-02T08:00:00Z"),
            },
            {
                "request_id": "request-2",
                "user_id": "user-3",
                "destination_place_id": "place-1",
                "destination_city_id": "city-2",
                "travel_date": date(2025, 3, 21),
                "description": "Nowruz trip to Isfahan, sharing a car from Tehran.",
                "status": "completed",
                "created_at": _ts("2024-02-28T16:30:00Z"),
            },
        ],
        "request_conditions": _children("request_id", "condition", [
            ("request-1", ["Non-smoker", "Early riser"]),
            ("request-2", ["Shares fuel costs"]),
        ]),
        "companion_matches": [
            {
                "match_id": "match-1",
                "request_id": "request-1",
                "companion_user_id": "user-1",
                "status": "pending",
                "message": "I know a great tea house near Eram.",
                "created_at": _ts("2024-05-03T12:00:00Z"),
            },
            {
                "match_id": "match-2",
                "request_id": "request-2",
                "companion_user_id": "user-4",
                "status": "accepted",
                "message": None,
                "created_at": _ts("2024-03-01T09:30:00Z"),
            },
        ],
    }
