"""
Typed step outcomes for per-group processing.

run_step() executes one group step and returns StepOk or StepFailed instead
of raising, so the group fold can only continue on a value it has checked.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Type, TypeVar, Union

import httpx

from ...services.exceptions import GroupError, MetaApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StepOk(Generic[T]):
    value: T


@dataclass(frozen=True)
class StepFailed:
    step: str
    error: GroupError

    @property
    def message(self) -> str:
        return str(self.error)


StepResult = Union[StepOk[T], StepFailed]


async def run_step(
    step: str,
    call: Callable[[], Awaitable[T]],
    error_type: Type[GroupError],
) -> "StepResult[T]":
    """
    Await `call` and wrap its result.

    GroupError subclasses pass through as-is. Anything else raised by the
    step is wrapped in `error_type`, so one group can never abort the
    groups after it.
    """
    try:
        return StepOk(await call())
    except GroupError as e:
        return StepFailed(step=step, error=e)
    except MetaApiError as e:
        return StepFailed(step=step, error=error_type(e.detail))
    except httpx.HTTPError as e:
        logger.warning(f"{step}: transport error {type(e).__name__}: {e}")
        return StepFailed(step=step, error=error_type(f"{type(e).__name__}: {e}"))
    except Exception as e:
        logger.exception(f"{step}: unexpected {type(e).__name__}")
        return StepFailed(step=step, error=error_type(f"{type(e).__name__}: {e}"))
