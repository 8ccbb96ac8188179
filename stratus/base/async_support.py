"""
Async support for Stratus clients.

Every client call is a blocking signed round trip.  ``async_wrap`` turns
such a call into an awaitable that runs in a worker thread via
:func:`asyncio.to_thread`, so wrappers can be awaited from an event loop.
Calls share no mutable state, which is what makes running several of them
in parallel threads safe.

Usage::

    from stratus.aws.compute import Compute

    ec2 = Compute({"aws_access_key_id": "...", "aws_secret_access_key": "..."})
    volumes = await ec2.adescribe_volumes()
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from typing import Any, Callable, Coroutine, TypeVar

T = TypeVar("T")


def async_wrap(
    fn: Callable[..., T],
) -> Callable[..., Coroutine[Any, Any, T]]:
    """Return an async version of *fn* that runs it in a thread.

    Args:
        fn: A synchronous callable to wrap.

    Returns:
        An async callable with the same parameters and return type.
    """

    @functools.wraps(fn)
    async def _wrapper(*args: Any, **kwargs: Any) -> T:
        return await asyncio.to_thread(fn, *args, **kwargs)

    return _wrapper


class AsyncMixin:
    """Mixin that generates an ``a<method>`` coroutine for each public method.

    Only plain functions defined on the subclass itself are wrapped;
    properties, class attributes and existing coroutines are left alone.

    Example::

        class Compute(AsyncMixin):
            def describe_volumes(self, volume_ids=()): ...
            # => await self.adescribe_volumes() is now available
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for name, attr in list(vars(cls).items()):
            if name.startswith("_") or not inspect.isfunction(attr):
                continue
            if inspect.iscoroutinefunction(attr):
                continue
            async_name = f"a{name}"
            if not hasattr(cls, async_name):
                setattr(cls, async_name, async_wrap(attr))
