"""
Chat Routes

POST /chat/messages - Send a message (persisted, then pushed over /ws)
GET /chat/messages/{user_id} - Conversation with another user, oldest first
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from placenet.api.deps import get_chat, get_hub, get_users
from placenet.core.auth import get_current_user
from placenet.core.errors import NotFound
from placenet.schemas.schemas import ChatMessageCreate, ChatMessageResponse
from placenet.services.realtime import ChannelHub
from placenet.services.repositories import ChatRepository, UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("/messages", response_model=ChatMessageResponse, status_code=201)
async def send_message(
    data: ChatMessageCreate,
    user: dict = Depends(get_current_user),
    chat: ChatRepository = Depends(get_chat),
    users: UserRepository = Depends(get_users),
    hub: ChannelHub = Depends(get_hub),
):
    if not users.get(data.receiver_id):
        raise NotFound("Receiver not found")

    stored = chat.create(user["user_id"], data.model_dump(mode="json"))
    message = ChatMessageResponse(**stored)

    # Persist first; a message that fails to store is never broadcast
    hub.publish({"type": "new_message", "data": message.model_dump(mode="json", by_alias=True)})
    return message


@router.get("/messages/{user_id}", response_model=List[ChatMessageResponse])
async def get_conversation(
    user_id: str,
    user: dict = Depends(get_current_user),
    chat: ChatRepository = Depends(get_chat),
):
    return chat.conversation(user["user_id"], user_id)
