from __future__ import annotations

from typing import Optional

import databases
import sqlalchemy
from sqlalchemy import func
from src.db import likes_table, post_table


def _contains(column, term: str):
    # Bound as a parameter: `databases` %-formats the compiled SQL text
    escaped = term.replace("/", "//").replace("%", "/%").replace("_", "/_")
    return column.like(f"%{escaped}%", escape="/")


def _posts_with_like_count():
    return (
        sqlalchemy.select(
            post_table,
            func.count(likes_table.c.post_id).label("like_count"),
        )
        .select_from(post_table.outerjoin(likes_table))
        .group_by(post_table.c.id)
    )


async def list_posts(database: databases.Database, search: Optional[str] = None):
    """
    All posts, newest first, each with the number of likes it has right now.

    A search term must appear in both the title and the content. Posts that
    match in only one of the two are excluded.
    """
    query = _posts_with_like_count()
    if search:
        query = query.where(
            _contains(post_table.c.title, search),
            _contains(post_table.c.content, search),
        )
    query = query.order_by(post_table.c.created_at.desc(), post_table.c.id.desc())
    return await database.fetch_all(query)


async def get_post(database: databases.Database, post_id: int):
    query = post_table.select().where(post_table.c.id == post_id)
    return await database.fetch_one(query)


async def liked_posts(database: databases.Database, user_id: int):
    liked = await database.fetch_all(
        sqlalchemy.select(likes_table.c.post_id).where(likes_table.c.user_id == user_id)
    )
    post_ids = [row["post_id"] for row in liked]
    if not post_ids:
        return []
    query = (
        post_table.select()
        .where(post_table.c.id.in_(post_ids))
        .order_by(post_table.c.created_at.desc(), post_table.c.id.desc())
    )
    return await database.fetch_all(query)
