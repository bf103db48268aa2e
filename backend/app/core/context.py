"""Request id held for the life of one HTTP call, read by the log filter."""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("plan_coach_request_id", default=None)


@contextmanager
def bound_request_id(request_id: str) -> Iterator[str]:
    token = request_id_ctx_var.set(request_id)
    try:
        yield request_id
    finally:
        request_id_ctx_var.reset(token)


def get_request_id() -> Optional[str]:
    return request_id_ctx_var.get()
