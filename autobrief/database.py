from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from autobrief.config import Settings

Base = declarative_base()


def enable_sqlite_savepoints(engine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINT works on pysqlite."""

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


def get_engine(settings: Settings):
    """Create a database engine for the configured URL."""
    url = settings.sqlalchemy_url
    connect_args = {}
    if url.startswith("sqlite"):
        # Sessions may be handed to the batch job from another thread
        connect_args["check_same_thread"] = False
    engine = create_engine(url, echo=settings.debug, connect_args=connect_args)
    if url.startswith("sqlite"):
        enable_sqlite_savepoints(engine)
    return engine


def get_session_factory(settings: Settings, engine=None) -> sessionmaker:
    engine = engine or get_engine(settings)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they register on Base.metadata
    import autobrief.models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        raise RuntimeError(f"Database initialization failed for {engine.url}: {e}") from e


@contextmanager
def session_scope(session_factory):
    """Provide a session that commits on success and rolls back on error."""
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
