from __future__ import annotations

import databases
from src.db import comment_table


async def list_comments_for_post(database: databases.Database, post_id: int):
    query = (
        comment_table.select()
        .where(comment_table.c.post_id == post_id)
        .order_by(comment_table.c.created_at.desc(), comment_table.c.id.desc())
    )
    return await database.fetch_all(query)
