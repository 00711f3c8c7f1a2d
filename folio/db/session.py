from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session
from folio.core.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, **kwargs) -> Engine:
    # check_same_thread is needed for SQLite, remove for PostgreSQL
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    db_engine = create_engine(url, **kwargs)
    if db_engine.dialect.name == "sqlite":
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)
    return db_engine


engine = create_db_engine(settings.DATABASE_URL)

def get_session():
    with Session(engine) as session:
        yield session

def create_db_and_tables(db_engine: Engine = engine):
    # Register every table with SQLModel metadata before create_all
    import folio.models

    SQLModel.metadata.create_all(db_engine)
