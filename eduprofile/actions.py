"""
Action runner - one user submit cycle.
======================================

State machine (per action):

    IDLE -> VALIDATING -> VALIDATION_FAILED -> IDLE
                       -> SUBMITTING -> SUCCESS -> IDLE
                                     -> FAILED  -> IDLE

A submit that arrives while the action is VALIDATING or SUBMITTING is
rejected with ``ActionInProgressError`` before any remote call. There is no
cancellation: an in-flight submit always runs to completion or failure.

Every outcome is converted into exactly one ``Notification``; errors never
propagate past ``ActionRunner.run`` (apart from the re-entrancy rejection,
which is not an outcome of the running action).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from .errors import ActionInProgressError, AuthError, SyncError, ValidationError
from .validation import ValidationResult

logger = logging.getLogger("eduprofile.actions")

ERROR_TITLE = "Error"
SUCCESS_TITLE = "¡Éxito!"


class ActionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    VALIDATION_FAILED = "validation_failed"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class Notification:
    success: bool
    title: str
    message: str
    data: Any = None
    error_code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "success": self.success,
            "title": self.title,
            "message": self.message,
            "data": self.data,
        }
        if self.error_code:
            payload["code"] = self.error_code
        return payload


class ActionRunner:
    """Runs one named action through validate -> submit -> resolve."""

    def __init__(
        self,
        name: str,
        success_message: str,
        default_error: str,
        auth_messages: Optional[Dict[str, str]] = None,
        success_title: str = SUCCESS_TITLE,
    ):
        self.name = name
        self.success_message = success_message
        self.default_error = default_error
        self.auth_messages = auth_messages or {}
        self.success_title = success_title
        self._state = ActionState.IDLE
        self.last_outcome: Optional[ActionState] = None

    @property
    def state(self) -> ActionState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is not ActionState.IDLE

    async def run(
        self,
        submit: Callable[[], Awaitable[Any]],
        validate: Optional[Callable[[], ValidationResult]] = None,
    ) -> Notification:
        if self.busy:
            logger.warning("action_rejected action=%s state=%s", self.name, self._state.value)
            raise ActionInProgressError(self.name)

        try:
            self._state = ActionState.VALIDATING
            if validate is not None:
                result = validate()
                if not result.ok:
                    self._state = ActionState.VALIDATION_FAILED
                    return self._failure(result.reason or self.default_error)

            self._state = ActionState.SUBMITTING
            data = await submit()
            self._state = ActionState.SUCCESS
            logger.info("action_success action=%s", self.name)
            return Notification(True, self.success_title, self.success_message, data=data)

        except ValidationError as e:
            self._state = ActionState.VALIDATION_FAILED
            return self._failure(e.message)
        except AuthError as e:
            self._state = ActionState.FAILED
            logger.warning("action_failed action=%s kind=auth code=%s", self.name, e.code)
            return self._failure(e.user_message(self.auth_messages, self.default_error), e.code)
        except SyncError as e:
            self._state = ActionState.FAILED
            logger.warning("action_failed action=%s kind=sync error=%s", self.name, e.message)
            return self._failure(e.message, "sync-error")
        except Exception as e:
            self._state = ActionState.FAILED
            logger.error("action_failed action=%s kind=unexpected error=%s", self.name, repr(e), exc_info=True)
            return self._failure(self.default_error, "internal-error")
        finally:
            self.last_outcome = self._state
            self._state = ActionState.IDLE

    def _failure(self, message: str, code: Optional[str] = None) -> Notification:
        return Notification(False, ERROR_TITLE, message, error_code=code)
