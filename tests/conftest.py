import os

# Must be set before hamsafar.config is imported
os.environ["USE_MOCK_DATA"] = "true"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hamsafar import mock_data
from hamsafar.database import Base, create_db_engine
from hamsafar.errors import DataSourceError
from hamsafar.mock_store import TABLES, MockStore
from hamsafar.sql_store import SqlStore
from hamsafar.store import DataStore, reset_store, set_store

# Stand-ins for the views the hosted backend provides
VIEWS = [
    """
    CREATE VIEW posts_with_rating AS
    SELECT p.post_id, p.user_id, p.place_id, p.city_id, p.title, p.content,
           p.experience_type, p.approval_status, p.created_at,
           COALESCE(AVG(r.score), 0) AS avg_rating,
           COUNT(r.score) AS rating_count
    FROM posts p
    LEFT JOIN ratings r ON r.post_id = p.post_id
    GROUP BY p.post_id
    """,
    """
    CREATE VIEW profiles_with_counts AS
    SELECT pr.profile_id, pr.user_id, pr.bio, pr.cover_image,
           (SELECT COUNT(*) FROM follows f WHERE f.following_id = pr.user_id) AS followers_count,
           (SELECT COUNT(*) FROM follows f WHERE f.follower_id = pr.user_id) AS following_count
    FROM profiles pr
    """,
]


class FailingStore(DataStore):
    """Store whose backend is unreachable."""

    name = "failing"

    def _fail(self, *args, **kwargs):
        raise DataSourceError("connection refused")

    select = insert = update = delete = upsert = _fail


@pytest.fixture(autouse=True)
def mock_store():
    store = MockStore()
    set_store(store)
    yield store
    reset_store()


@pytest.fixture
def sql_store():
    engine = create_db_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    with engine.begin() as connection:
        for statement in VIEWS:
            connection.execute(text(statement))

    store = SqlStore(sessionmaker(autoflush=False, bind=engine))
    data = mock_data.dataset()
    for table in TABLES:
        if data.get(table):
            store.insert(table, data[table])

    set_store(store)
    yield store
    reset_store()
    engine.dispose()


@pytest.fixture(params=["mock", "sql"])
def store(request):
    """The active store, once per data-source variant."""
    if request.param == "sql":
        return request.getfixturevalue("sql_store")
    return request.getfixturevalue("mock_store")


@pytest.fixture
def failing_store():
    store = FailingStore()
    set_store(store)
    yield store
    reset_store()
