# Copyright 2024-2025 Amiable Development
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Extension responses.

An extension answers a trigger with either a fixed value or a callback.
Both are wrapped in a small tagged variant so that execution dispatches
on the variant type instead of probing the registered object each time:

- StaticValue: inert data, returned as-is and blind to the trigger input
- Callback: unary callable, invoked with the trigger input; sync functions,
  coroutine functions and callables returning awaitables are all accepted

Classification happens once, at registration, via as_response().
"""

import asyncio
import functools
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol, Union, runtime_checkable


@runtime_checkable
class ExtensionCallback(Protocol):
    """
    Shape of a callable extension.

    The callback receives the trigger input (or, in serial execution, the
    previous extension's output) and returns a result or an awaitable
    resolving to one. Raising, or returning an awaitable that raises,
    marks the extension as failed.
    """

    def __call__(self, input: Any) -> Union[Any, Awaitable[Any]]:
        ...


@dataclass(frozen=True)
class StaticValue:
    """A fixed value returned for every trigger."""

    value: Any

    async def resolve(self, input: Any = None, offload: bool = False) -> Any:
        return self.value


@dataclass(frozen=True)
class Callback:
    """
    A callable invoked with the trigger input.

    Attributes:
        func: Unary callable, sync or async
    """

    func: Callable[[Any], Any]

    @property
    def is_async(self) -> bool:
        """Check if the wrapped callable is a coroutine function."""
        return inspect.iscoroutinefunction(self.func)

    async def resolve(self, input: Any = None, offload: bool = False) -> Any:
        """
        Invoke the callable and wait for its result.

        Args:
            input: Value passed to the callable
            offload: Run sync callables in the loop's default executor
                instead of on the event loop thread

        Returns:
            The callable's result, awaited if it returned an awaitable.
        """
        if offload and not self.is_async:
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(None, functools.partial(self.func, input))
        else:
            result = self.func(input)

        # Sync callables may still hand back a future or coroutine
        if inspect.isawaitable(result):
            result = await result

        return result


Response = Union[StaticValue, Callback]


def as_response(response: Any) -> Response:
    """
    Classify a registered response.

    Already-wrapped responses are returned unchanged, so a callable can be
    registered as plain data with ``StaticValue(func)``.

    Args:
        response: Value, callable, StaticValue or Callback

    Returns:
        The tagged response.
    """
    if isinstance(response, (StaticValue, Callback)):
        return response
    if callable(response):
        return Callback(response)
    return StaticValue(response)
