"""
In-memory data store for offline demos.

Every table is a process-local list of dict rows seeded from ``mock_data``.
Mutations apply immediately and are visible to the next call. The store
mirrors what the relational backend does on its own: generated keys,
foreign keys, unique composite keys, ``ON DELETE CASCADE`` / ``SET NULL``
and the two aggregate views.
"""

import itertools
import time
from datetime import datetime, timezone

from hamsafar import mock_data
from hamsafar.errors import FOREIGN_KEY_VIOLATION, DataSourceError, UniqueViolation
from hamsafar.store import DataStore


TABLES = (
    "users", "regular_users", "moderators", "admins",
    "profiles", "profile_interests",
    "cities", "places", "place_features", "place_images",
    "posts", "post_images", "comments", "ratings", "follows",
    "companion_requests", "request_conditions", "companion_matches",
)

# table -> (generated key column, id prefix)
GENERATED_KEYS = {
    "users": ("user_id", "user"),
    "profiles": ("profile_id", "profile"),
    "cities": ("city_id", "city"),
    "places": ("place_id", "place"),
    "posts": ("post_id", "post"),
    "comments": ("comment_id", "comment"),
    "companion_requests": ("request_id", "request"),
    "companion_matches": ("match_id", "match"),
}

# Child rows keyed by a plain integer surrogate
SURROGATE_KEYED = ("profile_interests", "place_features", "place_images", "post_images", "request_conditions")

TIMESTAMPED = ("users", "posts", "comments", "ratings", "follows", "companion_requests", "companion_matches")

UNIQUE_KEYS = {
    "profiles": ("user_id",),
    "ratings": ("user_id", "post_id"),
    "follows": ("follower_id", "following_id"),
}

CASCADE = "CASCADE"
SET_NULL = "SET NULL"

# child table -> [(column, parent table, parent column, on delete)]
FOREIGN_KEYS = {
    "regular_users": [("user_id", "users", "user_id", CASCADE)],
    "moderators": [("user_id", "users", "user_id", CASCADE)],
    "admins": [("user_id", "users", "user_id", CASCADE)],
    "profiles": [("user_id", "users", "user_id", CASCADE)],
    "profile_interests": [("profile_id", "profiles", "profile_id", CASCADE)],
    "places": [("city_id", "cities", "city_id", CASCADE)],
    "place_features": [("place_id", "places", "place_id", CASCADE)],
    "place_images": [("place_id", "places", "place_id", CASCADE)],
    "posts": [
        ("user_id", "users", "user_id", CASCADE),
        ("place_id", "places", "place_id", SET_NULL),
        ("city_id", "cities", "city_id", SET_NULL),
    ],
    "post_images": [("post_id", "posts", "post_id", CASCADE)],
    "comments": [
        ("post_id", "posts", "post_id", CASCADE),
        ("user_id", "users", "user_id", CASCADE),
    ],
    "ratings": [
        ("user_id", "users", "user_id", CASCADE),
        ("post_id", "posts", "post_id", CASCADE),
    ],
    "follows": [
        ("follower_id", "users", "user_id", CASCADE),
        ("following_id", "users", "user_id", CASCADE),
    ],
    "companion_requests": [
        ("user_id", "users", "user_id", CASCADE),
        ("destination_place_id", "places", "place_id", SET_NULL),
        ("destination_city_id", "cities", "city_id", SET_NULL),
    ],
    "request_conditions": [("request_id", "companion_requests", "request_id", CASCADE)],
    "companion_matches": [
        ("request_id", "companion_requests", "request_id", CASCADE),
        ("companion_user_id", "users", "user_id", CASCADE),
    ],
}


def _matches(row, filters):
    return all(row.get(column) == value for column, value in (filters or {}).items())


class MockStore(DataStore):
    name = "mock"

    def __init__(self, seed=None):
        data = mock_data.dataset() if seed is None else seed
        self.tables = {table: [dict(row) for row in data.get(table, [])] for table in TABLES}
        self._sequence = itertools.count(1)
        self._surrogate = {
            table: itertools.count(max((row.get("id", 0) for row in self.tables[table]), default=0) + 1)
            for table in SURROGATE_KEYED
        }
        self.views = {
            "posts_with_rating": self._posts_with_rating,
            "profiles_with_counts": self._profiles_with_counts,
        }

    def _rows(self, table):
        if table not in self.tables:
            raise DataSourceError(f"Unknown table: {table}")
        return self.tables[table]

    def _generate_id(self, prefix):
        # Millisecond timestamp plus a per-store sequence keeps ids distinct within a session
        return f"{prefix}-{int(time.time() * 1000)}-{next(self._sequence)}"

    def _check_unique(self, table, row, existing):
        key = UNIQUE_KEYS.get(table)
        if key is None:
            return
        values = {column: row.get(column) for column in key}
        if any(_matches(other, values) for other in existing):
            raise UniqueViolation(
                f'duplicate key value violates unique constraint on "{table}" ({", ".join(key)})'
            )

    def _check_references(self, table, row, columns=None):
        for column, parent, parent_column, _ in FOREIGN_KEYS.get(table, ()):
            if columns is not None and column not in columns:
                continue
            value = row.get(column)
            if value is None:
                continue
            if not any(other.get(parent_column) == value for other in self.tables[parent]):
                raise DataSourceError(
                    f'insert or update on "{table}" violates foreign key "{column}": '
                    f'{value!r} is not present in "{parent}"',
                    code=FOREIGN_KEY_VIOLATION,
                )

    def select(self, table, filters=None, order_by=None, descending=False):
        rows = self.views[table]() if table in self.views else self._rows(table)
        selected = [dict(row) for row in rows if _matches(row, filters)]
        if order_by:
            selected.sort(key=lambda row: row[order_by], reverse=descending)
        return selected

    def insert(self, table, rows):
        existing = self._rows(table)
        prepared = []
        for row in rows:
            row = dict(row)
            if table in GENERATED_KEYS:
                column, prefix = GENERATED_KEYS[table]
                if not row.get(column):
                    row[column] = self._generate_id(prefix)
            elif table in SURROGATE_KEYED:
                row.setdefault("id", next(self._surrogate[table]))
            if table in TIMESTAMPED:
                row.setdefault("created_at", datetime.now(timezone.utc))
            self._check_references(table, row)
            self._check_unique(table, row, existing + prepared)
            prepared.append(row)
        # All-or-nothing like a single multi-row INSERT statement
        existing.extend(prepared)
        return [dict(row) for row in prepared]

    def update(self, table, values, filters):
        matched = [row for row in self._rows(table) if _matches(row, filters)]
        for row in matched:
            self._check_references(table, dict(row, **values), columns=values)
        for row in matched:
            row.update(values)
        return len(matched)

    def delete(self, table, filters):
        rows = self._rows(table)
        doomed = [row for row in rows if _matches(row, filters)]
        if not doomed:
            return 0
        self.tables[table] = [row for row in rows if not _matches(row, filters)]
        for row in doomed:
            for child_table, foreign_keys in FOREIGN_KEYS.items():
                for column, parent, parent_column, on_delete in foreign_keys:
                    if parent != table:
                        continue
                    if on_delete == CASCADE:
                        self.delete(child_table, {column: row[parent_column]})
                    else:
                        self.update(child_table, {column: None}, {column: row[parent_column]})
        return len(doomed)

    def upsert(self, table, row, conflict):
        key = {column: row[column] for column in conflict}
        for existing in self._rows(table):
            if _matches(existing, key):
                existing.update({column: value for column, value in row.items() if column not in key})
                return dict(existing)
        return self.insert(table, [row])[0]

    def _posts_with_rating(self):
        scores = {}
        for rating in self.tables["ratings"]:
            scores.setdefault(rating["post_id"], []).append(rating["score"])
        rows = []
        for post in self.tables["posts"]:
            post_scores = scores.get(post["post_id"], [])
            rows.append(dict(
                post,
                avg_rating=sum(post_scores) / len(post_scores) if post_scores else 0,
                rating_count=len(post_scores),
            ))
        return rows

    def _profiles_with_counts(self):
        follows = self.tables["follows"]
        return [
            dict(
                profile,
                followers_count=sum(1 for f in follows if f["following_id"] == profile["user_id"]),
                following_count=sum(1 for f in follows if f["follower_id"] == profile["user_id"]),
            )
            for profile in self.tables["profiles"]
        ]
