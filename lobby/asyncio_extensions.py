"""
Some helper functions for common async tasks
"""

import asyncio
import inspect
from functools import wraps
from typing import Any, Callable, Coroutine, Optional, overload

AsyncFunc = Callable[..., Coroutine[Any, Any, Any]]
AsyncDecorator = Callable[[AsyncFunc], AsyncFunc]


class _partial(object):
    """
    Like functools.partial but applies arguments to the end.

    # Example:
    ```
    def foo(arg1, arg2):
        print(arg1, arg2)

    new = _partial(foo, "partially_applied")
    new("bar")
    # bar partially_applied
    ```
    """

    def __init__(self, func, *args):
        self.func = func
        self.args = args

    def __call__(self, *args):
        return self.func(*args, *self.args)


@overload
def synchronizedmethod() -> AsyncDecorator: ...
@overload
def synchronizedmethod(function: AsyncFunc) -> AsyncFunc: ...
@overload
def synchronizedmethod(lock_name: Optional[str]) -> AsyncDecorator: ...


def synchronizedmethod(*args):
    """
    Create a method that will be wrapped with an async lock. Each instance gets
    its own lock, so calls on different instances never wait for each other.

    # Params
    - `lock_name`: The name of the lock attribute that will be used. If the
        attribute doesn't exist or is None, a lock will be created. The default
        is to use a value based on the decorated function name.
    """
    # Invoked like @synchronizedmethod
    if args and inspect.isfunction(args[0]):
        return _synchronize_method(args[0])

    # Invoked like @synchronizedmethod() or @synchronizedmethod(args, ...)
    return _partial(_synchronize_method, *args)


def _synchronize_method(
    function: AsyncFunc,
    lock_name: Optional[str] = None
) -> AsyncFunc:
    """Wrap an async method with an async lock stored on the instance."""
    if lock_name is None:
        lock_name = f"#{function.__name__}_lock"

    @wraps(function)
    async def wrapped(obj, *args, **kwargs):
        lock = getattr(obj, lock_name, None)
        if lock is None:
            lock = asyncio.Lock()
            setattr(obj, lock_name, lock)

        async with lock:
            return await function(obj, *args, **kwargs)

    return wrapped
