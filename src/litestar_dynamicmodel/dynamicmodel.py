# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

"""
DynamicModel is a model class primarily used to support ad hoc data validation.

The typical usage of DynamicModel is as follows::

    model = DynamicModel(
        ["name", "email"],
        [
            ("name, email", "length", {"max": 50}),
        ],
    )
    model.set_attributes(data)
    if model.validate():
        ...  # validation succeeds
    else:
        ...  # validation fails, see model.get_errors()
"""

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Self

from litestar_dynamicmodel.lib.exceptions import ReservedAttributeError
from litestar_dynamicmodel.lib.model import Model
from litestar_dynamicmodel.lib.protocols import UnknownAttributeHandlerP
from litestar_dynamicmodel.lib import rules as r


class DynamicModel(Model):
    """
    A model whose attributes, rules and labels are given at runtime.
    """

    def __init__(
        self,
        attributes: Mapping[str, Any] | Iterable[str | tuple[str, Any]] = (),
        rules: Iterable[Any] = (),
        labels: Mapping[str, str] | None = None,
        scenario: str = "",
        *,
        unknown_attribute_handler: UnknownAttributeHandlerP | None = None,
    ) -> None:
        """
        Docstring for __init__

        :param attributes: the dynamic attributes being defined, either a
            mapping of name to value, or an iterable of names and
            (name, value) pairs
        :param rules: the validation rules, see lib.rules.normalize_rule()
            for the accepted forms
        :param labels: the attribute labels, missing labels are generated
            with generate_attribute_label()
        :param scenario: name of the scenario that this model is used in
        :param unknown_attribute_handler: handles names that are not attributes
        """
        super().__init__(
            scenario=scenario, unknown_attribute_handler=unknown_attribute_handler
        )
        self._attributes: dict[str, Any] = {}
        items = attributes.items() if isinstance(attributes, Mapping) else attributes
        for item in items:
            if isinstance(item, str):
                self.define_attribute(item)
            else:
                name, value = item
                self.define_attribute(name, value)
        self._rules: list[Any] = list(rules)
        self._labels: dict[str, str] = dict(labels or {})
        self.init()
        self.attach_behaviors(self.behaviors())
        self.after_construct()

    def is_reserved_name(self, name: str) -> bool:
        """
        Check whether name is taken by a member of the model, eg. scenario,
        rules or validate, or by its internal state.
        """
        return name in self.__dict__ or hasattr(type(self), name)

    def define_attribute(self, name: str, value: Any = None) -> None:
        """
        Make name a known attribute holding value.

        :raises ReservedAttributeError: if name is reserved by the model
        """
        if name not in self._attributes and self.is_reserved_name(name):
            raise ReservedAttributeError(self, name)
        self._attributes[name] = value

    @classmethod
    def from_names(
        cls,
        names: Iterable[str],
        rules: Iterable[Any] = (),
        labels: Mapping[str, str] | None = None,
        scenario: str = "",
        **kwargs: Any,
    ) -> Self:
        """Create a model whose attributes all start as None."""
        return cls(
            {name: None for name in names}, rules, labels, scenario, **kwargs
        )

    @classmethod
    def from_values(
        cls,
        values: Mapping[str, Any],
        rules: Iterable[Any] = (),
        labels: Mapping[str, str] | None = None,
        scenario: str = "",
        **kwargs: Any,
    ) -> Self:
        """Create a model from attribute name and initial value pairs."""
        return cls(dict(values), rules, labels, scenario, **kwargs)

    def attribute_labels(self) -> dict[str, str]:
        return self._labels

    def set_attribute_labels(self, labels: Mapping[str, str]) -> None:
        """Merge labels (name: label) into the current attribute labels."""
        for name, label in labels.items():
            self._labels[name] = label

    def attribute_names(self) -> list[str]:
        return list(self._attributes)

    def get_attributes(self, names: Iterable[str] | None = None) -> dict[str, Any]:
        """
        Return attribute values as a dict of name to value.

        :param names: only return these attributes, unknown names map to None
        """
        if names is not None:
            return {name: self._attributes.get(name) for name in names}
        return dict(self._attributes)

    @staticmethod
    def get_attributes_from_rules(rules: Iterable[Any], scenario: str = "") -> list[str]:
        """
        Get the attribute names validated by rules in the given scenario.

        :raises InvalidRuleError: if a rule lacks attributes or a validator
        """
        return r.get_attributes_from_rules(rules, scenario)

    def set_attributes(self, values: Any, safe_only: bool = True) -> None:
        """
        Set attribute values in a massive way.

        :param values: attribute values (name: value), anything else is ignored
        :param safe_only: only assign attributes that are safe in the current
            scenario, handing the others to on_unsafe_attribute()
        """
        if not isinstance(values, Mapping):
            return
        allowed = set(
            self.get_safe_attribute_names() if safe_only else self._attributes
        )
        for name, value in values.items():
            if name in allowed:
                self.define_attribute(name, value)
            elif safe_only:
                self.on_unsafe_attribute(name, value)

    def unset_attributes(self, names: Iterable[str] | None = None) -> None:
        """Remove the given attributes, or all of them when names is None."""
        if names is None:
            names = self.attribute_names()
        for name in list(names):
            self._attributes.pop(name, None)

    def rules(self) -> list[Any]:
        return self._rules

    def get_attribute_value(self, name: str) -> Any:
        if name in self._attributes:
            return self._attributes[name]
        return super().get_attribute_value(name)

    def set_attribute_value(self, name: str, value: Any) -> None:
        if name in self._attributes:
            self._attributes[name] = value
        else:
            super().set_attribute_value(name, value)

    # property-style access

    def __getattr__(self, name: str) -> Any:
        attributes = self.__dict__.get("_attributes")
        if attributes is not None and name in attributes:
            return attributes[name]
        return super().__getattr__(name)

    def __setattr__(self, name: str, value: Any) -> None:
        attributes = self.__dict__.get("_attributes")
        if attributes is not None and name in attributes:
            attributes[name] = value
        else:
            super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if name in self._attributes:
            del self._attributes[name]
        else:
            super().__delattr__(name)

    def is_set(self, name: str) -> bool:
        if name in self._attributes:
            return self._attributes[name] is not None
        return super().is_set(name)

    # index-style access

    def get(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Set a known attribute, unknown names go through the property fallback."""
        self.set_attribute_value(name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __getitem__(self, name: str) -> Any:
        return self._attributes[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self.define_attribute(name, value)

    def __delitem__(self, name: str) -> None:
        self._attributes.pop(name, None)

    def __len__(self) -> int:
        return len(self._attributes)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(list(self._attributes.items()))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self._attributes!r}>"


# EOF
