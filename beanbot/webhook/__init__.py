"""Chat webhook adapters."""

from beanbot.webhook.telegram import (
    Chat,
    Message,
    ResponseBody,
    Update,
    User,
    handle_update,
)

__all__ = [
    "Chat",
    "Message",
    "ResponseBody",
    "Update",
    "User",
    "handle_update",
]
