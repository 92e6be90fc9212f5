# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

from litestar_dynamicmodel.dynamicmodel import DynamicModel
from litestar_dynamicmodel.lib.exceptions import (
    DynamicModelError,
    InvalidRuleError,
    ModelValidationError,
    ReservedAttributeError,
    UnknownPropertyError,
    UnsafeAttributeError,
)
from litestar_dynamicmodel.lib.model import Behavior, Model, ModelEvent
from litestar_dynamicmodel.lib.rules import Rule, get_attributes_from_rules
from litestar_dynamicmodel.lib.validators import Validator

__all__ = [
    "Behavior",
    "DynamicModel",
    "DynamicModelError",
    "InvalidRuleError",
    "Model",
    "ModelEvent",
    "ModelValidationError",
    "ReservedAttributeError",
    "Rule",
    "UnknownPropertyError",
    "UnsafeAttributeError",
    "Validator",
    "get_attributes_from_rules",
]

# EOF
