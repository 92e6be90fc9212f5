# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"


# this module defines the capability interfaces used in litestar-dynamicmodel

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class UnknownAttributeHandlerP(Protocol):
    """
    This class decides what happens when a model is asked about a name
    that is neither a declared attribute nor a regular Python attribute
    """

    def get(self, model: Any, name: str) -> Any: ...

    def set(self, model: Any, name: str, value: Any) -> None: ...

    def delete(self, model: Any, name: str) -> None: ...

    def has(self, model: Any, name: str) -> bool: ...


# EOF
