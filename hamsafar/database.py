from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from hamsafar.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url, **kwargs):
    engine = create_engine(url, **kwargs)
    # SQLite only honours ON DELETE CASCADE when foreign keys are switched on per connection
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


engine = create_db_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO) if settings.DATABASE_URL else None
SessionLocal = sessionmaker(autoflush=False, bind=engine)

# Tables owned by the backend schema
Base = declarative_base()
# Read-only views computed by the backend; kept on their own metadata so create_all never builds them
ViewBase = declarative_base()
