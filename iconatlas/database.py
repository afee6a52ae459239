import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from .config.settings import get_database_url, get_pool_config, is_postgres_url

logger = logging.getLogger(__name__)

DATABASE_URL = get_database_url()
_USE_POSTGRES = is_postgres_url(DATABASE_URL)

# Create engine with appropriate pooling strategy
if _USE_POSTGRES:
    pool_config = get_pool_config()
    engine = create_engine(
        DATABASE_URL,
        poolclass=QueuePool,
        pool_size=pool_config["pool_size"],
        max_overflow=pool_config["max_overflow"],
        pool_timeout=pool_config["pool_timeout"],
        pool_recycle=pool_config["pool_recycle"],
        pool_pre_ping=pool_config["pool_pre_ping"],
    )
else:
    # StaticPool keeps one connection, so "sqlite://" (in-memory) survives across sessions.
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

Base = declarative_base()


def ensure_postgres_indexes():
    """
    Create PostgreSQL-specific indexes for favorites listing.
    Only runs against PostgreSQL.
    """
    if not _USE_POSTGRES:
        return

    indexes = [
        ("idx_favorites_created_at", "favorite_icons", "created_at DESC"),
    ]

    with engine.connect() as conn:
        for idx_name, table_name, columns in indexes:
            conn.execute(text(f"CREATE INDEX IF NOT EXISTS {idx_name} ON {table_name} ({columns})"))
            conn.commit()
            logger.info(f"Index {idx_name} ensured")
