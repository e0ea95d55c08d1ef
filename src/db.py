import databases
import sqlalchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from src.config import config

metadata = sqlalchemy.MetaData()

post_table = sqlalchemy.Table(
    "posts",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("user_id", sqlalchemy.Integer, nullable=False, index=True),
    # Snapshot of the author's display name at write time
    sqlalchemy.Column("nickname", sqlalchemy.String, nullable=False),
    sqlalchemy.Column("title", sqlalchemy.String, nullable=True),
    sqlalchemy.Column("content", sqlalchemy.Text, nullable=False),
    sqlalchemy.Column(
        "created_at",
        sqlalchemy.DateTime(timezone=True),
        server_default=sqlalchemy.text("CURRENT_TIMESTAMP"),
        nullable=False,
    ),
    sqlalchemy.Column(
        "updated_at",
        sqlalchemy.DateTime(timezone=True),
        server_default=sqlalchemy.text("CURRENT_TIMESTAMP"),
        nullable=False,
    ),
    # AUTOINCREMENT: ids of deleted posts are never reused
    sqlite_autoincrement=True,
)

likes_table = sqlalchemy.Table(
    "likes",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column(
        "post_id",
        sqlalchemy.ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    sqlalchemy.Column("user_id", sqlalchemy.Integer, nullable=False, index=True),
    # The like toggle relies on this constraint to reject concurrent duplicates
    sqlalchemy.UniqueConstraint("post_id", "user_id", name="uq_likes_post_user"),
)

comment_table = sqlalchemy.Table(
    "comments",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    # Weak reference: a comment may point at a post that no longer exists
    sqlalchemy.Column("post_id", sqlalchemy.Integer, nullable=False, index=True),
    sqlalchemy.Column("user_id", sqlalchemy.Integer, nullable=False),
    sqlalchemy.Column("nickname", sqlalchemy.String, nullable=False),
    sqlalchemy.Column("content", sqlalchemy.Text, nullable=False),
    sqlalchemy.Column(
        "created_at",
        sqlalchemy.DateTime(timezone=True),
        server_default=sqlalchemy.text("CURRENT_TIMESTAMP"),
        nullable=False,
    ),
    sqlalchemy.Column(
        "updated_at",
        sqlalchemy.DateTime(timezone=True),
        server_default=sqlalchemy.text("CURRENT_TIMESTAMP"),
        nullable=False,
    ),
)


def enable_sqlite_foreign_keys(sa_engine: Engine) -> None:
    """SQLite only enforces FOREIGN KEY clauses, ON DELETE CASCADE included, per connection."""

    @event.listens_for(sa_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


connect_args = {"check_same_thread": False} if "sqlite" in config.DATABASE_URI else {}
engine = sqlalchemy.create_engine(config.DATABASE_URI, connect_args=connect_args)
if engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(engine)
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)

database = databases.Database(
    config.DATABASE_URI, force_rollback=config.DB_FORCE_ROLL_BACK
)


def get_database() -> databases.Database:
    """FastAPI dependency for the read side; overridden in tests."""
    return database
