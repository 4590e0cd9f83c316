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
Extension Registry.

Name-indexed store of ExtensionPoint instances. Host code registers
extensions during setup and triggers points by name at its hooks.

Design:
- Registries are plain objects; hosts construct and pass them around
- default_registry() provides the usual one-per-process instance, and the
  module-level add/register/get/execute/execute_serial functions use it
- Points are created on first use and never removed
- Triggering a point nobody registered is a no-op returning None, so hook
  sites are safe to call unconditionally

Thread Safety:
- Creating the default registry is thread-safe via a module-level lock
- add()/register() are not synchronized; complete registration before
  triggering points concurrently
"""

import logging
import threading
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar, Union

from .config import ExecutionSettings
from .point import ExtensionPoint

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class ExtensionRegistry:
    """
    Central registry of extension points.

    Usage (host setup):
        registry = ExtensionRegistry()
        registry.register("greet", "a", "Hi")
        registry.register("greet", "b", lambda x: x + "!", priority=1)

    Usage (hook site):
        outcomes = await registry.execute("greet", "there")
        greeting = await registry.execute_serial("greet")

    Usage (fail-fast concurrent run):
        for point in registry.get(["greet"]):
            values = await point.execute("there", exit_on_error=True)
    """

    def __init__(self, settings: Optional[ExecutionSettings] = None):
        """
        Initialize an empty registry.

        Args:
            settings: Execution settings shared with every point created
                by this registry
        """
        self._settings = settings or ExecutionSettings()
        self._points: Dict[str, ExtensionPoint] = {}

    @property
    def settings(self) -> ExecutionSettings:
        return self._settings

    def add(self, name: str) -> ExtensionPoint:
        """
        Create an extension point, replacing any point with the same name.

        Replacing a point discards all of its registrations.

        Args:
            name: Extension point name

        Returns:
            The new, empty extension point
        """
        if name in self._points:
            logger.info(f"Extension point '{name}' reset ({len(self._points[name])} extension(s) dropped)")
        else:
            logger.debug(f"Extension point '{name}' created")

        point = ExtensionPoint(name, settings=self._settings)
        self._points[name] = point
        return point

    def register(self, name: str, extension_id: str, response: Any, priority: int = 0) -> None:
        """
        Register an extension, creating the extension point if needed.

        Args:
            name: Extension point name
            extension_id: Unique id for the extension within the point
            response: Value to return, or unary callable to invoke
            priority: Order for serial execution (ascending)

        Raises:
            InvalidExtensionError: If the id or priority has the wrong type
        """
        point = self._points.get(name)
        if point is None:
            point = self.add(name)
        point.register(extension_id, response, priority)

    def extension(
        self,
        name: str,
        extension_id: Optional[str] = None,
        priority: int = 0,
    ) -> Callable[[F], F]:
        """
        Decorator form of register().

        Example:
            @registry.extension("request.before", priority=10)
            async def add_request_id(request):
                ...

        Args:
            name: Extension point name
            extension_id: Extension id (defaults to the function's qualname)
            priority: Order for serial execution (ascending)

        Returns:
            Decorator that registers the function and returns it unchanged
        """

        def decorator(func: F) -> F:
            self.register(name, extension_id or func.__qualname__, func, priority)
            return func

        return decorator

    def get(
        self, names: Optional[Union[str, Iterable[str]]] = None
    ) -> Union[Mapping[str, ExtensionPoint], List[ExtensionPoint]]:
        """
        Fetch extension points.

        Args:
            names: Point names to fetch; all points if omitted. A single
                string is treated as one name.

        Returns:
            Without names, a read-only mapping of every point by name.
            With names, the existing points in the order requested;
            unknown names are skipped.
        """
        if names is None:
            return MappingProxyType(self._points)

        if isinstance(names, str):
            names = [names]

        return [self._points[name] for name in names if name in self._points]

    def has(self, name: str) -> bool:
        """Check if an extension point exists."""
        return name in self._points

    def names(self) -> List[str]:
        """Get extension point names in creation order."""
        return list(self._points)

    async def execute(self, name: str, input: Any = None) -> Optional[List[Any]]:
        """
        Run every extension of a point concurrently, collecting outcomes.

        Call this where the host code should be extendable. Failures are
        returned as Err outcomes; use get() and ExtensionPoint.execute(...,
        exit_on_error=True) to fail fast instead.

        Args:
            name: Extension point name
            input: Value passed to each callable extension

        Returns:
            One Ok/Err outcome per extension, or None if the point does
            not exist
        """
        point = self._points.get(name)
        if point is None:
            logger.debug(f"Extension point '{name}' not registered; execute skipped")
            return None
        return await point.execute(input)

    async def execute_serial(self, name: str, input: Any = None) -> Any:
        """
        Run the extensions of a point one at a time in priority order.

        Args:
            name: Extension point name
            input: Value passed to the first extension

        Returns:
            Output of the last extension (``input`` if the point is empty),
            or None if the point does not exist

        Raises:
            Exception: The first extension failure
        """
        point = self._points.get(name)
        if point is None:
            logger.debug(f"Extension point '{name}' not registered; execute_serial skipped")
            return None
        return await point.execute_serial(input)

    def get_status(self) -> dict:
        """
        Get the number of extensions registered per point.

        Returns:
            Dict mapping point name to extension count.

        Example:
            >>> registry.get_status()
            {"greet": 2, "request.before": 0}
        """
        return {name: len(point) for name, point in self._points.items()}

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, name: object) -> bool:
        return name in self._points

    def __repr__(self) -> str:
        return f"<ExtensionRegistry points={len(self._points)}>"


# =============================================================================
# Default registry (one per process)
# =============================================================================

_default: Optional[ExtensionRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> ExtensionRegistry:
    """
    Get the process-wide default registry, creating it on first use.

    Thread-safe: Uses double-checked locking pattern. Settings are read
    from the environment when the registry is created.

    Returns:
        The default ExtensionRegistry instance.
    """
    global _default
    if _default is None:
        with _default_lock:
            # Double-check after acquiring lock
            if _default is None:
                _default = ExtensionRegistry(settings=ExecutionSettings.from_env())
    return _default


def reset_default_registry() -> None:
    """
    Drop the default registry (for testing only).

    Warning:
        Never call in production code; registrations made through the
        module-level functions are lost.
    """
    global _default
    with _default_lock:
        _default = None


def add(name: str) -> ExtensionPoint:
    """Create (or reset) a point on the default registry."""
    return default_registry().add(name)


def register(name: str, extension_id: str, response: Any, priority: int = 0) -> None:
    """Register an extension on the default registry."""
    default_registry().register(name, extension_id, response, priority)


def extension(name: str, extension_id: Optional[str] = None, priority: int = 0) -> Callable[[F], F]:
    """Decorator registering a function on the default registry."""
    return default_registry().extension(name, extension_id, priority)


def get(
    names: Optional[Union[str, Iterable[str]]] = None,
) -> Union[Mapping[str, ExtensionPoint], List[ExtensionPoint]]:
    """Fetch points from the default registry."""
    return default_registry().get(names)


async def execute(name: str, input: Any = None) -> Optional[List[Any]]:
    """Run a point of the default registry concurrently."""
    return await default_registry().execute(name, input)


async def execute_serial(name: str, input: Any = None) -> Any:
    """Run a point of the default registry serially."""
    return await default_registry().execute_serial(name, input)
