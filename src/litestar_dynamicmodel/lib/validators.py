# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

import dataclasses
import importlib
import keyword
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from litestar_dynamicmodel.config.app import logger
from .exceptions import InvalidRuleError


_placeholder_re = re.compile(r"\{(\w+)\}")
_camel_re = re.compile(r"(?<!^)(?=[A-Z])")

_uuid_re = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
_email_re = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")

_true_literals = ("true", "1", "yes", "on")
_false_literals = ("false", "0", "no", "off")


def format_message(message: str, params: Mapping[str, Any]) -> str:
    """Replace {token} placeholders in message with values from params.

    Unknown tokens are left as they are.
    """
    return _placeholder_re.sub(
        lambda m: str(params[m.group(1)]) if m.group(1) in params else m.group(0),
        message,
    )


def param_name(key: str) -> str:
    """Map a rule parameter name to a validator field name.

    camelCase names become snake_case, and Python keywords get a trailing
    underscore, so "allowEmpty" becomes "allow_empty" and "is" becomes "is_".
    """
    name = _camel_re.sub("_", key).lower()
    if keyword.iskeyword(name):
        name += "_"
    return name


@dataclass
class Validator:
    """Base class for validators built from model rules."""

    attributes: list[str] = field(default_factory=list)
    on: list[str] = field(default_factory=list)
    except_: list[str] = field(default_factory=list)
    message: str | None = None
    skip_on_error: bool = False
    safe: bool = True

    def apply_to(self, scenario: str) -> bool:
        """
        Check whether this validator should run in the given scenario.

        :param scenario: scenario name
        :return: False if the scenario is excluded, otherwise True when the
            validator has no "on" scenarios or lists this one
        :rtype: bool
        """
        if scenario in self.except_:
            return False
        return not self.on or scenario in self.on

    def validate(self, model: Any, attributes: list[str] | None = None) -> None:
        """
        Validate the given attributes of the model, or all the attributes
        covered by this validator.

        :param model: the model being validated
        :param attributes: restrict validation to these attributes
        """
        if attributes is not None:
            names = [name for name in self.attributes if name in attributes]
        else:
            names = self.attributes
        for name in names:
            if not self.skip_on_error or not model.has_errors(name):
                self.validate_attribute(model, name)

    def validate_attribute(self, model: Any, attribute: str) -> None:
        raise NotImplementedError(
            "validate_attribute method must be implemented in subclass"
        )

    def add_error(
        self,
        model: Any,
        attribute: str,
        message: str,
        params: Mapping[str, Any] | None = None,
    ) -> None:
        values = dict(params or {})
        values.setdefault("attribute", model.get_attribute_label(attribute))
        model.add_error(attribute, format_message(message, values))

    @staticmethod
    def is_empty(value: Any, trim: bool = False) -> bool:
        if value is None or (isinstance(value, str) and value == ""):
            return True
        if isinstance(value, (list, tuple, dict, set)) and len(value) == 0:
            return True
        return trim and isinstance(value, str) and value.strip() == ""


@dataclass
class RequiredValidator(Validator):

    required_value: Any = None
    strict: bool = False
    trim: bool = True

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = model.get_attribute_value(attribute)
        if self.required_value is not None:
            if self.strict:
                matched = (
                    type(value) is type(self.required_value)
                    and value == self.required_value
                )
            else:
                matched = value == self.required_value or str(value) == str(
                    self.required_value
                )
            if not matched:
                self.add_error(
                    model,
                    attribute,
                    self.message or "{attribute} must be {value}.",
                    {"value": self.required_value},
                )
        elif self.is_empty(value, self.trim):
            self.add_error(
                model, attribute, self.message or "{attribute} cannot be blank."
            )


@dataclass
class LengthValidator(Validator):

    max: int | None = None
    min: int | None = None
    is_: int | None = None
    too_short: str | None = None
    too_long: str | None = None
    allow_empty: bool = True

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = model.get_attribute_value(attribute)
        if self.allow_empty and self.is_empty(value):
            return

        if isinstance(value, (list, tuple, dict, set)):
            self.add_error(model, attribute, self.message or "{attribute} is invalid.")
            return

        length = len("" if value is None else str(value))

        if self.min is not None and length < self.min:
            self.add_error(
                model,
                attribute,
                self.too_short
                or "{attribute} is too short (minimum is {min} characters).",
                {"min": self.min},
            )
        if self.max is not None and length > self.max:
            self.add_error(
                model,
                attribute,
                self.too_long
                or "{attribute} is too long (maximum is {max} characters).",
                {"max": self.max},
            )
        if self.is_ is not None and length != self.is_:
            self.add_error(
                model,
                attribute,
                self.message
                or "{attribute} is of the wrong length (should be {length} characters).",
                {"length": self.is_},
            )


@dataclass
class EmailValidator(Validator):

    pattern: str = _email_re.pattern
    allow_empty: bool = True

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = model.get_attribute_value(attribute)
        if self.allow_empty and self.is_empty(value):
            return
        if not self.validate_value(value):
            self.add_error(
                model,
                attribute,
                self.message or "{attribute} is not a valid email address.",
            )

    def validate_value(self, value: Any) -> bool:
        return (
            isinstance(value, str)
            and len(value) <= 254
            and re.match(self.pattern, value) is not None
        )


@dataclass
class UrlValidator(Validator):

    valid_schemes: list[str] = field(default_factory=lambda: ["http", "https"])
    default_scheme: str | None = None
    allow_empty: bool = True

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = model.get_attribute_value(attribute)
        if self.allow_empty and self.is_empty(value):
            return
        result = self.validate_value(value)
        if result is None:
            self.add_error(
                model, attribute, self.message or "{attribute} is not a valid URL."
            )
        elif result != value:
            model.set_attribute_value(attribute, result)

    def validate_value(self, value: Any) -> str | None:
        """Return the (possibly scheme-prefixed) URL, or None if it is invalid."""
        if not isinstance(value, str) or len(value) >= 2000:
            return None
        if self.default_scheme is not None and "://" not in value:
            value = f"{self.default_scheme}://{value}"
        schemes = "|".join(re.escape(s) for s in self.valid_schemes)
        pattern = (
            rf"^({schemes})://(([A-Z0-9][A-Z0-9_-]*)(\.[A-Z0-9][A-Z0-9_-]*)+)"
            r"(?::\d{1,5})?(?:$|[?/#])"
        )
        if re.match(pattern, value, re.IGNORECASE) is None:
            return None
        return value


@dataclass
class RegularExpressionValidator(Validator):

    pattern: str | None = None
    not_: bool = False
    allow_empty: bool = True

    def __post_init__(self) -> None:
        if not self.pattern:
            raise InvalidRuleError(
                "The 'pattern' property must be specified with a valid regular expression."
            )

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = model.get_attribute_value(attribute)
        if self.allow_empty and self.is_empty(value):
            return
        if isinstance(value, (list, tuple, dict, set)):
            self.add_error(model, attribute, self.message or "{attribute} is invalid.")
            return
        text = "" if value is None else str(value)
        found = re.search(self.pattern, text) is not None
        if found == self.not_:
            self.add_error(model, attribute, self.message or "{attribute} is invalid.")


@dataclass
class RangeValidator(Validator):

    range: list[Any] | None = None
    strict: bool = False
    not_: bool = False
    allow_empty: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.range, (list, tuple, set, frozenset)):
            raise InvalidRuleError(
                "The 'range' property must be specified with a list of values."
            )

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = model.get_attribute_value(attribute)
        if self.allow_empty and self.is_empty(value):
            return

        if self.strict:
            found = any(type(value) is type(r) and value == r for r in self.range)
        else:
            found = any(value == r or str(value) == str(r) for r in self.range)

        if not self.not_ and not found:
            self.add_error(
                model, attribute, self.message or "{attribute} is not in the list."
            )
        elif self.not_ and found:
            self.add_error(
                model, attribute, self.message or "{attribute} is in the list."
            )


@dataclass
class NumberValidator(Validator):

    integer_only: bool = False
    max: int | float | None = None
    min: int | float | None = None
    too_big: str | None = None
    too_small: str | None = None
    integer_pattern: str = r"^\s*[+-]?\d+\s*$"
    number_pattern: str = r"^\s*[-+]?[0-9]*\.?[0-9]+([eE][-+]?[0-9]+)?\s*$"
    allow_empty: bool = True

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = model.get_attribute_value(attribute)
        if self.allow_empty and self.is_empty(value):
            return

        if isinstance(value, (bool, list, tuple, dict, set)):
            self.add_error(
                model, attribute, self.message or "{attribute} must be a number."
            )
            return

        if self.integer_only:
            if re.match(self.integer_pattern, str(value)) is None:
                self.add_error(
                    model, attribute, self.message or "{attribute} must be an integer."
                )
                return
        elif re.match(self.number_pattern, str(value)) is None:
            self.add_error(
                model, attribute, self.message or "{attribute} must be a number."
            )
            return

        number = float(value)
        if self.min is not None and number < self.min:
            self.add_error(
                model,
                attribute,
                self.too_small or "{attribute} is too small (minimum is {min}).",
                {"min": self.min},
            )
        if self.max is not None and number > self.max:
            self.add_error(
                model,
                attribute,
                self.too_big or "{attribute} is too big (maximum is {max}).",
                {"max": self.max},
            )


_compare_messages = {
    "=": "{attribute} must be repeated exactly.",
    "==": "{attribute} must be repeated exactly.",
    "!=": '{attribute} must not be equal to "{compareValue}".',
    ">": '{attribute} must be greater than "{compareValue}".',
    ">=": '{attribute} must be greater than or equal to "{compareValue}".',
    "<": '{attribute} must be less than "{compareValue}".',
    "<=": '{attribute} must be less than or equal to "{compareValue}".',
}


def _ordered(value: Any, other: Any) -> tuple[Any, Any]:
    try:
        return float(value), float(other)
    except (TypeError, ValueError):
        return str(value), str(other)


@dataclass
class CompareValidator(Validator):

    compare_attribute: str | None = None
    compare_value: Any = None
    strict: bool = False
    operator: str = "="
    allow_empty: bool = False

    def __post_init__(self) -> None:
        if self.operator not in _compare_messages:
            raise InvalidRuleError(f"Invalid operator '{self.operator}'.")

    def _equals(self, value: Any, other: Any) -> bool:
        if self.strict:
            return type(value) is type(other) and value == other
        return value == other or str(value) == str(other)

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = model.get_attribute_value(attribute)
        if self.allow_empty and self.is_empty(value):
            return

        if self.compare_value is not None:
            compare_to = compare_label = self.compare_value
        else:
            compare_attribute = self.compare_attribute or f"{attribute}_repeat"
            compare_to = model.get_attribute_value(compare_attribute)
            compare_label = model.get_attribute_label(compare_attribute)

        if self.operator in ("=", "=="):
            failed = not self._equals(value, compare_to)
        elif self.operator == "!=":
            failed = self._equals(value, compare_to)
        else:
            left, right = _ordered(value, compare_to)
            failed = {
                ">": left <= right,
                ">=": left < right,
                "<": left >= right,
                "<=": left > right,
            }[self.operator]

        if failed:
            self.add_error(
                model,
                attribute,
                self.message or _compare_messages[self.operator],
                {"compareAttribute": compare_label, "compareValue": compare_label},
            )


@dataclass
class BooleanValidator(Validator):

    true_value: Any = "1"
    false_value: Any = "0"
    strict: bool = False
    allow_empty: bool = True

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = model.get_attribute_value(attribute)
        if self.allow_empty and self.is_empty(value):
            return
        if not self.validate_value(value):
            self.add_error(
                model,
                attribute,
                self.message or "{attribute} must be either {true} or {false}.",
                {"true": self.true_value, "false": self.false_value},
            )

    def validate_value(self, value: Any) -> bool:
        if self.strict:
            return any(
                type(value) is type(v) and value == v
                for v in (self.true_value, self.false_value)
            )
        if isinstance(value, bool):
            return True
        text = str(value).lower()
        return text in (
            str(self.true_value).lower(),
            str(self.false_value).lower(),
            *_true_literals,
            *_false_literals,
        )


@dataclass
class UUIDValidator(Validator):

    allow_empty: bool = True

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = model.get_attribute_value(attribute)
        if self.allow_empty and self.is_empty(value):
            return
        if not _uuid_re.match(str(value)):
            self.add_error(
                model, attribute, self.message or "{attribute} must be a valid UUID."
            )


@dataclass
class DefaultValueValidator(Validator):

    value: Any = None
    set_on_empty: bool = True

    def validate_attribute(self, model: Any, attribute: str) -> None:
        if not self.set_on_empty:
            model.set_attribute_value(attribute, self.value)
            return
        current = model.get_attribute_value(attribute)
        if current is None or current == "":
            model.set_attribute_value(attribute, self.value)


@dataclass
class FilterValidator(Validator):

    filter: Callable[[Any], Any] | str | None = None

    def __post_init__(self) -> None:
        if self.filter is None:
            raise InvalidRuleError(
                "The 'filter' property must be specified with a callable."
            )

    def validate_attribute(self, model: Any, attribute: str) -> None:
        func = self.filter
        if isinstance(func, str):
            func = getattr(model, func)
        if not callable(func):
            raise InvalidRuleError(
                "The 'filter' property must be specified with a callable."
            )
        model.set_attribute_value(attribute, func(model.get_attribute_value(attribute)))


@dataclass
class SafeValidator(Validator):
    """Marks attributes as safe for massive assignment."""

    def validate_attribute(self, model: Any, attribute: str) -> None:
        pass


@dataclass
class UnsafeValidator(Validator):
    """Marks attributes as unsafe so massive assignment skips them."""

    safe: bool = False

    def validate_attribute(self, model: Any, attribute: str) -> None:
        pass


@dataclass
class InlineValidator(Validator):
    """Calls a validation method defined on the model."""

    method: str = ""
    params: dict[str, Any] = field(default_factory=dict)

    def validate_attribute(self, model: Any, attribute: str) -> None:
        getattr(model, self.method)(attribute, self.params)


BUILTIN_VALIDATORS: dict[str, type[Validator]] = {
    "required": RequiredValidator,
    "filter": FilterValidator,
    "match": RegularExpressionValidator,
    "email": EmailValidator,
    "url": UrlValidator,
    "compare": CompareValidator,
    "length": LengthValidator,
    "in": RangeValidator,
    "numerical": NumberValidator,
    "boolean": BooleanValidator,
    "uuid": UUIDValidator,
    "default": DefaultValueValidator,
    "safe": SafeValidator,
    "unsafe": UnsafeValidator,
}


def _import_validator(path: str) -> type[Validator]:
    module_name, _, class_name = path.rpartition(".")
    try:
        module = importlib.import_module(module_name)
        validator_class = getattr(module, class_name)
    except (ImportError, AttributeError, ValueError) as exc:
        raise InvalidRuleError(f"Unable to import validator class '{path}'.") from exc
    if not (isinstance(validator_class, type) and issubclass(validator_class, Validator)):
        raise InvalidRuleError(f"'{path}' is not a Validator class.")
    return validator_class


def resolve_validator_class(name: Any, model: Any) -> type[Validator] | None:
    """
    Find the validator class for a rule's validator identifier.

    :param name: method name, built-in name, Validator subclass or dotted path
    :param model: the model owning the rule
    :return: the validator class, or None when name refers to a model method
    :raises InvalidRuleError: if the name cannot be resolved
    """
    if isinstance(name, str):
        if callable(getattr(type(model), name, None)):
            return None
        if name in BUILTIN_VALIDATORS:
            return BUILTIN_VALIDATORS[name]
        if "." in name:
            return _import_validator(name)
    elif isinstance(name, type) and issubclass(name, Validator):
        return name
    raise InvalidRuleError(f"Unknown validator {name!r}.")


def create_validator(
    name: Any,
    model: Any,
    attributes: list[str],
    params: Mapping[str, Any] | None = None,
    on: list[str] | None = None,
    except_: list[str] | None = None,
) -> Validator:
    """
    Create a validator from the parts of a rule.

    :param name: the validator identifier of the rule
    :param model: the model owning the rule
    :param attributes: attributes to be validated
    :param params: extra rule parameters passed to the validator
    :param on: scenarios in which the validator applies
    :param except_: scenarios in which the validator does not apply
    :return: the validator
    :raises InvalidRuleError: for unknown validators or parameters
    """
    params = dict(params or {})
    base = dict(attributes=list(attributes), on=list(on or []), except_=list(except_ or []))

    validator_class = resolve_validator_class(name, model)
    if validator_class is None:
        logger.debug("creating inline validator %s for %s", name, attributes)
        return InlineValidator(method=name, params=params, **base)

    init_fields = {f.name for f in dataclasses.fields(validator_class) if f.init}
    kwargs: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in params.items():
        field_name = param_name(key)
        if field_name in base:
            continue
        if field_name in init_fields:
            kwargs[field_name] = value
        elif hasattr(validator_class, field_name):
            extra[field_name] = value
        else:
            raise InvalidRuleError(
                f"Unknown parameter '{key}' for validator "
                f"{validator_class.__name__}."
            )

    logger.debug(
        "creating %s for %s with %s", validator_class.__name__, attributes, kwargs
    )
    validator = validator_class(**base, **kwargs)
    for field_name, value in extra.items():
        setattr(validator, field_name, value)
    return validator


# EOF
