# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

from typing import Any


class DynamicModelError(Exception):
    """Base class of all errors raised by litestar-dynamicmodel."""


class InvalidRuleError(DynamicModelError, ValueError):

    def __init__(
        self,
        message: str = (
            "Invalid validation rule. The rule must specify attributes "
            "to be validated and the validator name."
        ),
        rule: Any = None,
    ):
        """
        Docstring for __init__

        :param message: message to be shown
        :param rule: the offending rule descriptor, if known
        """
        super().__init__(message)
        self.rule = rule


class UnknownPropertyError(DynamicModelError, AttributeError):

    def __init__(self, model: Any, name: str):
        super().__init__(
            f"Property {model.__class__.__name__}.{name} is not defined."
        )
        self.property_name = name


class UnsafeAttributeError(DynamicModelError, ValueError):

    def __init__(self, name: str, value: Any):
        """
        Docstring for __init__

        :param name: the attribute that was refused
        :param value: the value that was being assigned
        """
        super().__init__(f"Failed to set unsafe attribute '{name}'.")
        self.name = name
        self.value = value


class ReservedAttributeError(DynamicModelError, ValueError):

    def __init__(self, model: Any, name: str):
        super().__init__(
            f"Attribute name '{name}' is reserved by {model.__class__.__name__}."
        )
        self.name = name


class ModelValidationError(DynamicModelError, ValueError):

    def __init__(self, error_list: list[tuple[str, str]]):
        """
        Docstring for __init__

        :param error_list: list of tuples of (message, attribute name)
        """
        super().__init__(
            f"Value error(s) in {len(error_list)} attribute(s): {error_list}"
        )
        self.error_list = error_list


# EOF
