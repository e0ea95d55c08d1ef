from __future__ import annotations

from functools import partial
from typing import Dict, List, Type

from src.domain import commands, events
from src.service_layer import handlers, unit_of_work
from src.service_layer.messagebus import MessageBus
from src.service_layer.unit_of_work import SqlAlchemyUnitOfWork


def bootstrap(uow: unit_of_work.AbstractUnitOfWork | None = None) -> MessageBus:
    uow = uow or SqlAlchemyUnitOfWork()

    command_handlers: Dict[Type[commands.Command], callable] = {
        commands.CreatePost: partial(handlers.create_post, uow=uow),
        commands.UpdatePost: partial(handlers.update_post, uow=uow),
        commands.DeletePost: partial(handlers.delete_post, uow=uow),
        commands.CreateComment: partial(handlers.create_comment, uow=uow),
        commands.UpdateComment: partial(handlers.update_comment, uow=uow),
        commands.DeleteComment: partial(handlers.delete_comment, uow=uow),
        commands.ToggleLike: partial(handlers.toggle_like, uow=uow),
    }

    event_handlers: Dict[Type[events.Event], List[callable]] = {
        events.PostCreated: [handlers.log_activity],
        events.CommentAdded: [handlers.log_activity],
        events.LikeToggled: [handlers.log_activity],
    }

    return MessageBus(uow=uow, event_handlers=event_handlers, command_handlers=command_handlers)


def get_message_bus() -> MessageBus:
    """
    FastAPI dependency. Every request gets its own bus and unit of work, so
    requests served from the threadpool never share a session.
    """
    return bootstrap()
