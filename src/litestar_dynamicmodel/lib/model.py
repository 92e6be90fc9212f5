# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

import inspect
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from litestar_dynamicmodel.config.app import logger
from litestar_dynamicmodel.config.model import get_config

from .exceptions import (
    DynamicModelError,
    ModelValidationError,
    UnknownPropertyError,
    UnsafeAttributeError,
)
from .protocols import UnknownAttributeHandlerP
from .rules import merge_names, normalize_rule
from .validators import RequiredValidator, Validator, create_validator


_label_re = re.compile(r"(?<![A-Z])[A-Z]")
_word_re = re.compile(r"(^|\s)(\S)")
_missing = object()


@dataclass
class ModelEvent:
    """Event parameter passed to event handlers of a model."""

    sender: Any
    params: dict[str, Any] = field(default_factory=dict)
    handled: bool = False
    # before-validate handlers set this to False to cancel validation
    is_valid: bool = True


class RaisingUnknownAttributeHandler:
    """Default unknown attribute handler, refuses every unknown name."""

    def get(self, model: Any, name: str) -> Any:
        raise UnknownPropertyError(model, name)

    def set(self, model: Any, name: str, value: Any) -> None:
        raise UnknownPropertyError(model, name)

    def delete(self, model: Any, name: str) -> None:
        raise UnknownPropertyError(model, name)

    def has(self, model: Any, name: str) -> bool:
        return False


class Behavior:
    """
    A behavior adds event handlers and properties to the model it is attached to.

    Subclasses override events() to map an event name to the name of the
    handler method, eg. {"on_before_validate": "before_validate"}.
    """

    def __init__(self, **options: Any) -> None:
        self.owner: Any = None
        self.enabled: bool = True
        for key, value in options.items():
            setattr(self, key, value)

    def events(self) -> dict[str, str]:
        return {}

    def attach(self, owner: Any) -> None:
        self.owner = owner
        for event_name, method_name in self.events().items():
            owner.attach_event_handler(event_name, getattr(self, method_name))

    def detach(self, owner: Any) -> None:
        for event_name, method_name in self.events().items():
            owner.detach_event_handler(event_name, getattr(self, method_name))
        self.owner = None


class Model:
    """
    Base class of models whose attributes are validated by rules.

    Subclasses provide attribute_names() and usually rules() and
    attribute_labels(). Names that are neither instance state, class
    attributes nor properties of an attached behavior are passed to the
    unknown attribute handler, which by default raises UnknownPropertyError.
    """

    __events__: tuple[str, ...] = (
        "on_after_construct",
        "on_before_validate",
        "on_after_validate",
    )

    def __init__(
        self,
        scenario: str = "",
        unknown_attribute_handler: UnknownAttributeHandlerP | None = None,
    ) -> None:
        self._scenario: str = scenario
        self._errors: dict[str, list[str]] = {}
        self._validators: list[Validator] | None = None
        self._event_handlers: dict[str, list[Callable[[ModelEvent], Any]]] = {}
        self._behaviors: dict[str, Behavior] = {}
        self.set_unknown_attribute_handler(
            unknown_attribute_handler or RaisingUnknownAttributeHandler()
        )

    # unknown property fallback

    def _is_declared(self, name: str) -> bool:
        if name.startswith("_") or name in self.__dict__:
            return True
        # class data and properties are assignable, methods are not
        member = inspect.getattr_static(type(self), name, _missing)
        return member is not _missing and not inspect.isroutine(member)

    def __getattr__(self, name: str) -> Any:
        # only reached when regular lookup fails
        if name.startswith("__") or "_unknown_handler" not in self.__dict__:
            raise AttributeError(name)
        for behavior in self.__dict__["_behaviors"].values():
            if behavior.enabled and hasattr(behavior, name):
                return getattr(behavior, name)
        return self._unknown_handler.get(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if self._is_declared(name):
            object.__setattr__(self, name, value)
        else:
            self._unknown_handler.set(self, name, value)

    def __delattr__(self, name: str) -> None:
        if name in self.__dict__:
            object.__delattr__(self, name)
        else:
            self._unknown_handler.delete(self, name)

    def is_set(self, name: str) -> bool:
        """Check whether a property exists and holds a non-None value."""
        if name in self.__dict__ or hasattr(type(self), name):
            return getattr(self, name) is not None
        for behavior in self._behaviors.values():
            if behavior.enabled and hasattr(behavior, name):
                return getattr(behavior, name) is not None
        return self._unknown_handler.has(self, name)

    def set_unknown_attribute_handler(self, handler: UnknownAttributeHandlerP) -> None:
        if not isinstance(handler, UnknownAttributeHandlerP):
            raise TypeError(
                f"{handler!r} does not implement get, set, delete and has"
            )
        self._unknown_handler = handler

    # scenario

    @property
    def scenario(self) -> str:
        return self._scenario

    @scenario.setter
    def scenario(self, value: str) -> None:
        self._scenario = value

    # declarations, override these in subclasses

    def init(self) -> None:
        """
        Initialize the model, invoked by the constructor of subclasses right
        after the scenario is set.
        """
        pass

    def attribute_names(self) -> list[str]:
        raise NotImplementedError(
            "attribute_names method must be implemented in subclass"
        )

    def rules(self) -> list[Any]:
        return []

    def attribute_labels(self) -> dict[str, str]:
        return {}

    def behaviors(self) -> dict[str, Any]:
        return {}

    # attribute values

    def get_attribute_value(self, name: str) -> Any:
        return getattr(self, name)

    def set_attribute_value(self, name: str, value: Any) -> None:
        setattr(self, name, value)

    def get_attributes(self, names: list[str] | None = None) -> dict[str, Any]:
        values = {name: self.get_attribute_value(name) for name in self.attribute_names()}
        if names is not None:
            return {name: values.get(name) for name in names}
        return values

    def set_attributes(self, values: Any, safe_only: bool = True) -> None:
        if not isinstance(values, Mapping):
            return
        allowed = set(
            self.get_safe_attribute_names() if safe_only else self.attribute_names()
        )
        for name, value in values.items():
            if name in allowed:
                self.set_attribute_value(name, value)
            elif safe_only:
                self.on_unsafe_attribute(name, value)

    def unset_attributes(self, names: list[str] | None = None) -> None:
        if names is None:
            names = self.attribute_names()
        for name in names:
            self.set_attribute_value(name, None)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self.get_attributes().items())

    # validators

    def create_validators(self) -> list[Validator]:
        """
        Create validator objects based on rules()

        :raises InvalidRuleError: if a rule is malformed
        """
        validators = []
        for rule in self.rules():
            rule = normalize_rule(rule)
            validators.append(
                create_validator(
                    rule.validator,
                    self,
                    rule.attributes,
                    rule.params,
                    on=rule.on,
                    except_=rule.except_,
                )
            )
        return validators

    def get_validator_list(self) -> list[Validator]:
        """Return all validators declared in rules(), created once per instance."""
        if self._validators is None:
            self._validators = self.create_validators()
        return self._validators

    def get_validators(self, attribute: str | None = None) -> list[Validator]:
        """
        Return the validators applicable to the current scenario.

        :param attribute: only return validators covering this attribute
        """
        return [
            validator
            for validator in self.get_validator_list()
            if validator.apply_to(self.scenario)
            and (attribute is None or attribute in validator.attributes)
        ]

    def validate(
        self, attributes: list[str] | None = None, clear_errors: bool = True
    ) -> bool:
        """
        Perform validation based on the applicable rules.

        :param attributes: only validate these attributes, None means all
        :param clear_errors: clear previous errors before validating
        :return: True if no error was found
        """
        if clear_errors:
            self.clear_errors()
        if not self.before_validate():
            return False
        for validator in self.get_validators():
            validator.validate(self, attributes)
        self.after_validate()
        if self.has_errors():
            logger.debug(
                "%s failed validation: %s", self.__class__.__name__, self._errors
            )
            return False
        return True

    def validate_or_raise(self, attributes: list[str] | None = None) -> None:
        """
        Validate, raising ModelValidationError with (message, attribute)
        pairs if any rule fails.
        """
        if not self.validate(attributes):
            raise ModelValidationError(
                [
                    (message, attribute)
                    for attribute, messages in self._errors.items()
                    for message in messages
                ]
            )

    def before_validate(self) -> bool:
        event = ModelEvent(self)
        self.on_before_validate(event)
        return event.is_valid

    def after_validate(self) -> None:
        self.on_after_validate(ModelEvent(self))

    def after_construct(self) -> None:
        self.on_after_construct(ModelEvent(self))

    # errors

    def has_errors(self, attribute: str | None = None) -> bool:
        if attribute is None:
            return any(self._errors.values())
        return bool(self._errors.get(attribute))

    def get_errors(self, attribute: str | None = None) -> Any:
        if attribute is None:
            return {name: list(errors) for name, errors in self._errors.items()}
        return list(self._errors.get(attribute, []))

    def get_error(self, attribute: str) -> str | None:
        errors = self._errors.get(attribute)
        return errors[0] if errors else None

    def add_error(self, attribute: str, error: str) -> None:
        self._errors.setdefault(attribute, []).append(error)

    def add_errors(self, errors: Mapping[str, str | list[str]]) -> None:
        for attribute, error in errors.items():
            if isinstance(error, (list, tuple)):
                for message in error:
                    self.add_error(attribute, message)
            else:
                self.add_error(attribute, error)

    def clear_errors(self, attribute: str | None = None) -> None:
        if attribute is None:
            self._errors = {}
        else:
            self._errors.pop(attribute, None)

    # labels

    def get_attribute_label(self, attribute: str) -> str:
        labels = self.attribute_labels()
        if labels.get(attribute) is not None:
            return labels[attribute]
        return self.generate_attribute_label(attribute)

    @staticmethod
    def generate_attribute_label(name: str) -> str:
        """
        Generate a user friendly label from an attribute name, so that
        "first_name", "first-name" and "firstName" all become "First Name".
        """
        label = _label_re.sub(lambda m: " " + m.group(0), name)
        for char in "-_.":
            label = label.replace(char, " ")
        label = label.lower().strip()
        return _word_re.sub(lambda m: m.group(1) + m.group(2).upper(), label)

    # safe attributes

    def is_attribute_required(self, attribute: str) -> bool:
        return any(
            isinstance(validator, RequiredValidator)
            for validator in self.get_validators(attribute)
        )

    def is_attribute_safe(self, attribute: str) -> bool:
        return attribute in self.get_safe_attribute_names()

    def get_safe_attribute_names(self) -> list[str]:
        """
        Return the attributes that may be massively assigned in the current
        scenario: those covered by a safe validator and not covered by an
        unsafe one.
        """
        safe: list[str] = []
        unsafe: set[str] = set()
        for validator in self.get_validators():
            if validator.safe:
                merge_names(safe, validator.attributes)
            else:
                unsafe.update(validator.attributes)
        return [name for name in safe if name not in unsafe]

    def on_unsafe_attribute(self, name: str, value: Any) -> None:
        """
        Called by set_attributes() for a value whose attribute is not safe.
        The default applies the configured unsafe attribute policy.
        """
        config = get_config()
        if config.UNSAFE_ATTRIBUTE_POLICY == "raise":
            raise UnsafeAttributeError(name, value)
        if config.UNSAFE_ATTRIBUTE_POLICY == "log" or config.DEBUG:
            logger.warning(
                "Failed to set unsafe attribute '%s' of '%s'.",
                name,
                self.__class__.__name__,
            )

    # events

    def has_event(self, name: str) -> bool:
        return name in self.__events__

    def attach_event_handler(
        self, name: str, handler: Callable[[ModelEvent], Any]
    ) -> None:
        if not self.has_event(name):
            raise DynamicModelError(
                f"Event {self.__class__.__name__}.{name} is not defined."
            )
        self._event_handlers.setdefault(name, []).append(handler)

    def detach_event_handler(
        self, name: str, handler: Callable[[ModelEvent], Any]
    ) -> bool:
        handlers = self._event_handlers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def raise_event(self, name: str, event: ModelEvent) -> None:
        """Call the handlers of an event in order until one marks it handled."""
        if not self.has_event(name):
            raise DynamicModelError(
                f"Event {self.__class__.__name__}.{name} is not defined."
            )
        for handler in list(self._event_handlers.get(name, [])):
            handler(event)
            if event.handled:
                return

    def on_after_construct(self, event: ModelEvent) -> None:
        self.raise_event("on_after_construct", event)

    def on_before_validate(self, event: ModelEvent) -> None:
        self.raise_event("on_before_validate", event)

    def on_after_validate(self, event: ModelEvent) -> None:
        self.raise_event("on_after_validate", event)

    # behaviors

    def attach_behaviors(self, behaviors: Mapping[str, Any]) -> None:
        for name, behavior in behaviors.items():
            self.attach_behavior(name, behavior)

    def attach_behavior(self, name: str, behavior: Any) -> Behavior:
        """
        Attach a behavior to this model.

        :param name: name of the behavior
        :param behavior: a Behavior instance, a Behavior subclass, or a mapping
            with a "class" key and the options for the behavior
        :return: the attached behavior
        """
        if isinstance(behavior, type):
            behavior = behavior()
        elif isinstance(behavior, Mapping):
            options = dict(behavior)
            behavior = options.pop("class")(**options)
        behavior.attach(self)
        self._behaviors[name] = behavior
        return behavior

    def detach_behavior(self, name: str) -> Behavior | None:
        behavior = self._behaviors.pop(name, None)
        if behavior is not None:
            behavior.detach(self)
        return behavior

    def get_behavior(self, name: str) -> Behavior | None:
        return self._behaviors.get(name)


# EOF
