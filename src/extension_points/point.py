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
Extension points.

An ExtensionPoint is one named hook. Extensions registered against it are
triggered in one of two ways:

- execute(): every extension runs concurrently with the same input. Failures
  are either collected per slot (Ok/Err outcomes) or raised on the first one
  (exit_on_error=True).
- execute_serial(): extensions run one at a time in ascending priority, each
  receiving the previous one's output. The first failure stops the chain.

Extension failures are never logged or swallowed here; they reach the
caller unchanged.

Concurrency:
- All execution happens on the caller's event loop
- register() is not synchronized; finish registering before triggering
"""

import asyncio
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .config import ExecutionSettings
from .errors import InvalidExtensionError
from .outcomes import Err, Ok, Outcome
from .responses import Response, as_response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Extension:
    """
    One registered extension.

    Attributes:
        extension_id: Unique id within its point
        response: StaticValue or Callback
        priority: Serial execution order (ascending), default 0
    """

    extension_id: str
    response: Response
    priority: int = 0

    async def run(self, input: Any = None, offload: bool = False) -> Any:
        """Resolve this extension's response for the given input."""
        return await self.response.resolve(input, offload=offload)


class ExtensionPoint:
    """
    A named hook holding registered extensions.

    Usage:
        point = ExtensionPoint("greet")
        point.register("a", "Hi")
        point.register("b", lambda x: x + "!", priority=1)

        await point.execute_serial("ignored")   # "Hi!"
        await point.execute("there")            # [Ok("Hi"), Ok("there!")]
    """

    def __init__(self, name: str, settings: Optional[ExecutionSettings] = None):
        self._name = name
        self._settings = settings or ExecutionSettings()
        self._extensions: Dict[str, Extension] = {}

    @property
    def name(self) -> str:
        """Point name (read-only)."""
        return self._name

    @property
    def settings(self) -> ExecutionSettings:
        return self._settings

    @property
    def extensions(self) -> Mapping[str, Extension]:
        """Read-only view of registered extensions, in registration order."""
        return MappingProxyType(self._extensions)

    @property
    def extension_ids(self) -> Tuple[str, ...]:
        return tuple(self._extensions)

    def register(self, extension_id: str, response: Any, priority: int = 0) -> None:
        """
        Register an extension, replacing any existing one with the same id.

        A replaced extension keeps its original position in registration
        order; only its response and priority change.

        Args:
            extension_id: Unique id within this point
            response: Value to return, or unary callable to invoke
            priority: Order for serial execution (ascending)

        Raises:
            InvalidExtensionError: If the id or priority has the wrong type
        """
        if not isinstance(extension_id, str) or not extension_id:
            raise InvalidExtensionError(
                self._name, f"extension id must be a non-empty string, got {extension_id!r}"
            )
        # bool is an int subclass but never a meaningful priority
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise InvalidExtensionError(
                self._name, f"priority must be an int, got {type(priority).__name__}"
            )

        if extension_id in self._extensions:
            logger.debug(f"Extension '{extension_id}' on '{self._name}' replaced")
        else:
            logger.debug(f"Extension '{extension_id}' registered on '{self._name}'")

        self._extensions[extension_id] = Extension(
            extension_id=extension_id,
            response=as_response(response),
            priority=priority,
        )

    async def execute(self, input: Any = None, exit_on_error: bool = False) -> List[Any]:
        """
        Run every extension concurrently with the same input.

        Args:
            input: Value passed to each callable extension
            exit_on_error: Raise the first failure instead of collecting
                per-extension outcomes

        Returns:
            With exit_on_error=False, one Ok/Err outcome per extension in
            registration order. With exit_on_error=True, the plain values
            in registration order.

        Raises:
            Exception: The first extension failure, only when exit_on_error
                is True. Extensions still in flight are not cancelled.
        """
        extensions = list(self._extensions.values())
        logger.debug(
            f"Executing '{self._name}' with {len(extensions)} extension(s)"
            f" (exit_on_error={exit_on_error})"
        )

        if exit_on_error:
            return list(await asyncio.gather(*(self._run(ext, input) for ext in extensions)))

        return list(await asyncio.gather(*(self._settle(ext, input) for ext in extensions)))

    async def execute_serial(self, input: Any = None) -> Any:
        """
        Run extensions one at a time in ascending priority order.

        The first extension receives ``input``; every later one receives the
        previous extension's output. Static values ignore what they receive
        and pass their own value on. Equal priorities keep registration order.

        Args:
            input: Value passed to the first extension

        Returns:
            Output of the last extension, or ``input`` if none are registered

        Raises:
            Exception: The first extension failure; later extensions do not run
        """
        ordered = sorted(self._extensions.values(), key=lambda ext: ext.priority)
        logger.debug(f"Executing '{self._name}' serially over {len(ordered)} extension(s)")

        result = input
        for ext in ordered:
            result = await self._run(ext, result)

        return result

    async def _run(self, ext: Extension, input: Any) -> Any:
        return await ext.run(input, offload=self._settings.offload_sync_callbacks)

    async def _settle(self, ext: Extension, input: Any) -> Outcome:
        """Run one extension and capture its result or exception as an outcome."""
        try:
            return Ok(await self._run(ext, input))
        except Exception as e:
            return Err(e)

    def __len__(self) -> int:
        return len(self._extensions)

    def __contains__(self, extension_id: object) -> bool:
        return extension_id in self._extensions

    def __repr__(self) -> str:
        return f"<ExtensionPoint {self._name!r} extensions={len(self._extensions)}>"
