"""Notices - turn operation outcomes into user-facing toast messages."""

from enum import Enum
from typing import Any, Awaitable, Optional
from pydantic import BaseModel, Field

from petconnect.utils.errors import (
    AuthorizationError,
    BackendError,
    ConflictError,
    PetConnectError,
    SlotOverlapError,
    ValidationError,
)
from petconnect.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

LOGIN_REQUIRED = "Please log in again"
CONFLICT_MESSAGE = "This was changed elsewhere. Refresh and try again."


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class Notice(BaseModel):
    """One toast shown to the user."""
    level: NoticeLevel
    message: str
    redirect_to_login: bool = Field(False, description="Session is no longer valid")
    result: Any = Field(None, exclude=True)

    @property
    def ok(self) -> bool:
        return self.level is not NoticeLevel.ERROR


def notice_for_error(error: PetConnectError) -> Notice:
    if isinstance(error, AuthorizationError):
        message = LOGIN_REQUIRED if error.requires_login else str(error)
        return Notice(level=NoticeLevel.ERROR, message=message, redirect_to_login=error.requires_login)
    if isinstance(error, ConflictError):
        return Notice(level=NoticeLevel.ERROR, message=CONFLICT_MESSAGE)
    return Notice(level=NoticeLevel.ERROR, message=str(error) or type(error).__name__)


async def run_action(action: Awaitable, success_message: str, info_message: Optional[str] = None) -> Notice:
    """
    Await ``action`` and describe the outcome.

    Lifecycle no-ops (a result with ``performed`` False) become info notices
    carrying ``info_message`` or the result's own message. OperationCancelledError
    and programming errors propagate.
    """
    try:
        result = await action
    except (ValidationError, SlotOverlapError, BackendError) as e:
        logger.warning(
            "Action failed",
            error=str(e),
            error_type=type(e).__name__,
            status_code=getattr(e, "status_code", None)
        )
        return notice_for_error(e)

    if getattr(result, "performed", True) is False:
        message = info_message or getattr(result, "message", "") or success_message
        return Notice(level=NoticeLevel.INFO, message=message, result=result)
    return Notice(level=NoticeLevel.SUCCESS, message=success_message, result=result)
