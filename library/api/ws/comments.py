import asyncio
import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PayloadError

from library.api.deps import get_channel, get_identity_service
from library.core.errors import FieldError, LibraryError, ValidationError
from library.domains.comments.channel import COMMENT_ERROR, BroadcastChannel, HandleClosed
from library.domains.comments.schemas import NewComment
from library.domains.identity.entities import ANONYMOUS_USERNAME, Identity
from library.domains.identity.services import IdentityService

logger = logging.getLogger(__name__)

router = APIRouter()

JOIN_ROOM = "join room"
NEW_COMMENT = "new comment"


class WebSocketHandle:
    """Подписчик канала поверх WebSocket.

    События складываются в очередь и отправляются отдельной задачей,
    поэтому ``deliver`` никогда не ждёт сети.
    """

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.closed = False
        self._queue: asyncio.Queue = asyncio.Queue()

    def deliver(self, event: str, data: Any) -> None:
        if self.closed:
            raise HandleClosed()
        self._queue.put_nowait({"event": event, "data": data})

    async def pump(self) -> None:
        """Отправка событий из очереди до закрытия соединения"""
        while True:
            message = await self._queue.get()
            if message is None:
                break
            try:
                await self.websocket.send_text(json.dumps(message))
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug(f"Send failed, closing handle: {e}")
                self.closed = True
                break

    def close(self) -> None:
        self.closed = True
        self._queue.put_nowait(None)


def _book_id_from(data: Any) -> Optional[str]:
    # Клиент может прислать ID книги строкой или объектом {"bookId": ...}
    if isinstance(data, dict):
        data = data.get("bookId")
    return data if isinstance(data, str) else None


def _parse_new_comment(data: Any) -> NewComment:
    try:
        return NewComment.model_validate(data if isinstance(data, dict) else {})
    except PayloadError as e:
        raise ValidationError([
            FieldError(".".join(str(part) for part in error["loc"]) or "data", f"{error['loc'][-1]}: {error['msg']}")
            for error in e.errors()
        ])


async def handle_message(
    message: dict,
    handle: WebSocketHandle,
    identity: Identity,
    channel: BroadcastChannel
) -> None:
    """Обработка одного события клиента"""
    message_type = message.get("event")
    data = message.get("data")

    try:
        if message_type == JOIN_ROOM:
            await channel.join(handle, _book_id_from(data))

        elif message_type == NEW_COMMENT:
            comment = _parse_new_comment(data)
            username = identity.username if identity.is_authenticated else (comment.username or ANONYMOUS_USERNAME)
            await channel.post(comment.book_id, comment.text, username)

        elif message_type == "ping":
            handle.deliver("pong", None)

        else:
            handle.deliver(COMMENT_ERROR, {"message": f"Unknown event: {message_type}"})

    except LibraryError as e:
        # Ошибка сообщается только отправителю, не всей комнате
        logger.info(f"Event {message_type!r} rejected: {e}")
        handle.deliver(COMMENT_ERROR, {"message": str(e)})


@router.websocket("/ws/comments")
async def comments_endpoint(
    websocket: WebSocket,
    token: Optional[str] = None,
    channel: BroadcastChannel = Depends(get_channel),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """WebSocket эндпоинт комментариев к книгам"""
    await websocket.accept()
    identity = await identity_service.resolve_identity(token)
    logger.info(f"WebSocket accepted for {identity.username}")

    handle = WebSocketHandle(websocket)
    writer = asyncio.create_task(handle.pump())

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                handle.deliver(COMMENT_ERROR, {"message": "Malformed message"})
                continue
            if not isinstance(message, dict):
                handle.deliver(COMMENT_ERROR, {"message": "Malformed message"})
                continue

            await handle_message(message, handle, identity, channel)

    except WebSocketDisconnect:
        logger.info(f"WebSocket closed for {identity.username}")

    finally:
        channel.disconnect(handle)
        handle.close()
        await writer
