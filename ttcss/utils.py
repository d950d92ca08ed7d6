from __future__ import annotations

import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """Await value if it is awaitable; sync collaborators return plain values."""
    if inspect.isawaitable(value):
        return await value
    return value
