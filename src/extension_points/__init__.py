"""Extension points - a lightweight plugin/hook registry.

Host code declares named extension points, third parties register values
or callbacks against them, and the host triggers them either concurrently
or in priority order.

Usage:
    import extension_points

    extension_points.register("greet", "a", "Hi")
    extension_points.register("greet", "b", lambda x: x + "!", priority=1)

    await extension_points.execute_serial("greet")   # "Hi!"

    # Or with an explicitly owned registry
    registry = extension_points.ExtensionRegistry()
    registry.register("greet", "a", "Hi")

For installation:
    pip install extension-points
    pip install "extension-points[dev]"    # + test tooling
"""

try:
    from extension_points._version import __version__, __version_tuple__
except ImportError:
    # Package not installed (development mode without build)
    __version__ = "0.0.0.dev0"
    __version_tuple__ = (0, 0, 0, "dev0")

from .config import ExecutionSettings
from .errors import ExtensionPointError, InvalidExtensionError
from .outcomes import Err, Ok, Outcome
from .point import Extension, ExtensionPoint
from .registry import (
    ExtensionRegistry,
    add,
    default_registry,
    execute,
    execute_serial,
    extension,
    get,
    register,
    reset_default_registry,
)
from .responses import Callback, ExtensionCallback, StaticValue, as_response

__all__ = [
    "__version__",
    "__version_tuple__",
    # Core
    "ExtensionPoint",
    "Extension",
    "ExtensionRegistry",
    # Responses
    "StaticValue",
    "Callback",
    "ExtensionCallback",
    "as_response",
    # Outcomes
    "Ok",
    "Err",
    "Outcome",
    # Settings
    "ExecutionSettings",
    # Errors
    "ExtensionPointError",
    "InvalidExtensionError",
    # Default registry
    "default_registry",
    "reset_default_registry",
    "add",
    "register",
    "extension",
    "get",
    "execute",
    "execute_serial",
]
