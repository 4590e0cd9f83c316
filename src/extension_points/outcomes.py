# Copyright 2024-2025 Amiable Development
# SPDX-License-Identifier: Apache-2.0

"""Settled outcomes of a concurrent extension run.

When an extension point runs with errors tolerated, each extension gets
exactly one slot in the result list, holding either:
- Ok: the value the extension produced
- Err: the exception it raised
"""

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Ok:
    """Successful extension outcome."""

    value: Any

    @property
    def ok(self) -> bool:
        """Return True for a successful outcome."""
        return True

    def unwrap(self) -> Any:
        """Return the produced value."""
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed extension outcome.

    Attributes:
        error: The exception raised by the extension.
    """

    error: BaseException

    @property
    def ok(self) -> bool:
        """Return False for a failed outcome."""
        return False

    def unwrap(self) -> Any:
        """Re-raise the stored exception."""
        raise self.error


Outcome = Union[Ok, Err]
