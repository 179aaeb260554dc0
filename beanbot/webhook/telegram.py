"""
Telegram webhook adapter.

Decodes an inbound update, runs the transaction flow on the message
text and builds the ``sendMessage`` payload returned in the webhook
response body.
"""

from typing import Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from beanbot.orchestrator import TransactionFlow


logger = structlog.get_logger(__name__)


class User(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    is_bot: bool = False
    first_name: str = ""
    username: Optional[str] = None
    language_code: Optional[str] = None


class Chat(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    first_name: Optional[str] = None
    username: Optional[str] = None
    chat_type: str = Field(default="private", alias="type")


class Message(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    message_id: int
    from_user: Optional[User] = Field(default=None, alias="from")
    chat: Chat
    date: int
    text: Optional[str] = None


class Update(BaseModel):
    model_config = ConfigDict(extra="ignore")

    update_id: int
    message: Optional[Message] = None
    edited_message: Optional[Message] = None

    @property
    def effective_message(self) -> Optional[Message]:
        """The new message, or the edited one if that is all we got."""
        return self.message or self.edited_message


class ResponseBody(BaseModel):
    """Bot API method call returned as the webhook response."""

    method: str = "sendMessage"
    chat_id: int
    text: str
    reply_to_message_id: int


def handle_update(
    body: Union[str, bytes],
    flow: TransactionFlow,
) -> Optional[ResponseBody]:
    """
    Process one webhook request body.

    Returns:
        The reply payload, or None when there is nothing to answer
        (undecodable body, no message, no text)
    """
    try:
        update = Update.model_validate_json(body)
    except ValidationError as e:
        logger.warning("webhook_body_rejected", error=str(e))
        return None

    message = update.effective_message
    if message is None:
        logger.warning("webhook_update_without_message", update_id=update.update_id)
        return None
    if not message.text:
        logger.info("webhook_message_without_text", message_id=message.message_id)
        return None

    result = flow.process(message.text)
    return ResponseBody(
        chat_id=message.chat.id,
        text=result.reply_text,
        reply_to_message_id=message.message_id,
    )
