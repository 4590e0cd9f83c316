# Copyright 2024-2025 Amiable Development
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised by the extension point registry itself.

Failures raised by extensions are never wrapped: they reach the caller of
execute()/execute_serial() unchanged. The classes here only cover mistakes
made while registering.
"""


class ExtensionPointError(Exception):
    """Base exception for extension point errors."""

    pass


class InvalidExtensionError(ExtensionPointError, TypeError):
    """Raised when an extension is registered with an invalid id or priority."""

    def __init__(self, point: str, message: str):
        self.point = point
        super().__init__(f"Extension point '{point}': {message}")
