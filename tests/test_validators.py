"""Tests for built-in, inline and class validators."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

import pytest

from litestar_dynamicmodel import DynamicModel, InvalidRuleError, Validator
from litestar_dynamicmodel.lib.validators import (
    LengthValidator,
    create_validator,
    format_message,
    param_name,
)


def errors_for(data: dict[str, Any], *rules: Any, **kwargs: Any) -> dict[str, list[str]]:
    model = DynamicModel(data, list(rules), **kwargs)
    model.validate()
    return model.get_errors()


def test_param_name_mapping() -> None:
    """camelCase and keyword parameter names map to validator fields."""

    assert param_name("allowEmpty") == "allow_empty"
    assert param_name("integerOnly") == "integer_only"
    assert param_name("skip_on_error") == "skip_on_error"
    assert param_name("is") == "is_"
    assert param_name("not") == "not_"


def test_format_message_leaves_unknown_tokens() -> None:
    """Only known placeholders are replaced."""

    assert format_message("{attribute} and {other}", {"attribute": "Name"}) == (
        "Name and {other}"
    )


def test_required() -> None:
    """Blank values, including whitespace, are refused."""

    assert errors_for({"name": "  "}, ("name", "required")) == {
        "name": ["Name cannot be blank."]
    }
    assert errors_for({"name": "John"}, ("name", "required")) == {}
    assert errors_for({"tags": []}, ("tags", "required")) == {
        "tags": ["Tags cannot be blank."]
    }


def test_required_value() -> None:
    """A required value must be matched exactly."""

    rule = ("agree", "required", {"requiredValue": "1", "message": "You must agree."})
    assert errors_for({"agree": "0"}, rule) == {"agree": ["You must agree."]}
    assert errors_for({"agree": 1}, rule) == {}
    strict = ("agree", "required", {"requiredValue": "1", "strict": True})
    assert errors_for({"agree": 1}, strict) == {"agree": ["Agree must be 1."]}


def test_length() -> None:
    """Length bounds use the attribute label in their messages."""

    assert errors_for({"code": "ab"}, ("code", "length", {"min": 3})) == {
        "code": ["Code is too short (minimum is 3 characters)."]
    }
    assert errors_for(
        {"name": "abcdefg"},
        ("name", "length", {"max": 5}),
        labels={"name": "Full name"},
    ) == {"name": ["Full name is too long (maximum is 5 characters)."]}
    assert errors_for({"pin": "123"}, ("pin", "length", {"is": 4})) == {
        "pin": ["Pin is of the wrong length (should be 4 characters)."]
    }
    assert errors_for({"pin": None}, ("pin", "length", {"is": 4})) == {}
    assert errors_for(
        {"pin": ""}, ("pin", "length", {"is": 4, "allowEmpty": False})
    ) == {"pin": ["Pin is of the wrong length (should be 4 characters)."]}


def test_missing_value_is_empty_when_not_allowed() -> None:
    """A None value counts as an empty string, never as the text None."""

    length = ("name", "length", {"min": 1, "max": 10, "allowEmpty": False})
    assert errors_for({"name": None}, length) == {
        "name": ["Name is too short (minimum is 1 characters)."]
    }

    match = ("name", "match", {"pattern": "^N", "allowEmpty": False})
    assert errors_for({"name": None}, match) == {"name": ["Name is invalid."]}

    negated = ("name", "match", {"pattern": "one", "not": True, "allowEmpty": False})
    assert errors_for({"name": None}, negated) == {}


def test_length_custom_message() -> None:
    """tooLong replaces the default message and may use tokens."""

    rule = ("name", "length", {"max": 3, "tooLong": "{attribute} over {max}"})
    assert errors_for({"name": "abcd"}, rule) == {"name": ["Name over 3"]}


def test_email() -> None:
    """Email addresses must look like user@domain.tld."""

    assert errors_for({"email": "not-an-email"}, ("email", "email")) == {
        "email": ["Email is not a valid email address."]
    }
    assert errors_for({"email": "john@example.com"}, ("email", "email")) == {}


def test_url_with_default_scheme() -> None:
    """A default scheme is prepended to a valid URL without one."""

    model = DynamicModel(
        {"site": "example.com", "bad": "ftp://example.com"},
        [
            ("site", "url", {"defaultScheme": "https"}),
            ("bad", "url"),
        ],
    )
    assert model.validate() is False
    assert model.site == "https://example.com"
    assert model.get_errors() == {"bad": ["Bad is not a valid URL."]}


def test_match() -> None:
    """Values must (or must not) match the pattern."""

    rule = ("code", "match", {"pattern": r"^[A-Z]{3}$"})
    assert errors_for({"code": "ABC"}, rule) == {}
    assert errors_for({"code": "abc"}, rule) == {"code": ["Code is invalid."]}

    negated = ("code", "match", {"pattern": r"\d", "not": True})
    assert errors_for({"code": "abc1"}, negated) == {"code": ["Code is invalid."]}
    assert errors_for({"code": "abc"}, negated) == {}


def test_match_requires_pattern() -> None:
    """A match rule without pattern is an invalid rule."""

    model = DynamicModel({"code": "x"}, [("code", "match")])
    with pytest.raises(InvalidRuleError, match="pattern"):
        model.validate()


def test_in_range() -> None:
    """Values are looked up in the range, loosely unless strict."""

    assert errors_for({"size": "XL"}, ("size", "in", {"range": ["S", "M", "L"]})) == {
        "size": ["Size is not in the list."]
    }
    assert errors_for({"size": "M"}, ("size", "in", {"range": ["S", "M", "L"]})) == {}
    assert errors_for({"qty": "2"}, ("qty", "in", {"range": [1, 2]})) == {}
    assert errors_for({"qty": "2"}, ("qty", "in", {"range": [1, 2], "strict": True})) == {
        "qty": ["Qty is not in the list."]
    }
    assert errors_for({"qty": 3}, ("qty", "in", {"range": [3], "not": True})) == {
        "qty": ["Qty is in the list."]
    }


def test_numerical() -> None:
    """Numbers are checked for form and bounds."""

    rule = ("age", "numerical", {"integerOnly": True, "min": 18})
    assert errors_for({"age": "17"}, rule) == {
        "age": ["Age is too small (minimum is 18)."]
    }
    assert errors_for({"age": "abc"}, rule) == {"age": ["Age must be an integer."]}
    assert errors_for({"age": "1.5"}, rule) == {"age": ["Age must be an integer."]}
    assert errors_for({"age": 30}, rule) == {}

    assert errors_for({"price": 10.5}, ("price", "numerical", {"max": 10})) == {
        "price": ["Price is too big (maximum is 10)."]
    }
    assert errors_for({"price": "1e3"}, ("price", "numerical")) == {}
    assert errors_for({"price": "ten"}, ("price", "numerical")) == {
        "price": ["Price must be a number."]
    }


def test_compare_with_repeat_attribute() -> None:
    """By default a value is compared with its _repeat attribute."""

    rules = [("password", "compare")]
    assert errors_for({"password": "a", "password_repeat": "b"}, *rules) == {
        "password": ["Password must be repeated exactly."]
    }
    assert errors_for({"password": "a", "password_repeat": "a"}, *rules) == {}
    assert errors_for(
        {"password": "a", "confirm": "a"},
        ("password", "compare", {"compareAttribute": "confirm"}),
    ) == {}


def test_compare_with_operator() -> None:
    """Ordering operators compare numerically when possible."""

    rule = ("age", "compare", {"compareValue": 18, "operator": ">="})
    assert errors_for({"age": "17"}, rule) == {
        "age": ['Age must be greater than or equal to "18".']
    }
    assert errors_for({"age": "18"}, rule) == {}
    assert errors_for(
        {"code": "x"}, ("code", "compare", {"compareValue": "x", "operator": "!="})
    ) == {"code": ['Code must not be equal to "x".']}


def test_compare_rejects_unknown_operator() -> None:
    """Unsupported operators make the rule invalid."""

    model = DynamicModel({"a": 1}, [("a", "compare", {"compareValue": 1, "operator": "<>"})])
    with pytest.raises(InvalidRuleError, match="operator"):
        model.validate()


def test_boolean() -> None:
    """Boolean values accept common literals unless strict."""

    assert errors_for({"agree": "maybe"}, ("agree", "boolean")) == {
        "agree": ["Agree must be either 1 or 0."]
    }
    assert errors_for({"agree": "yes"}, ("agree", "boolean")) == {}
    assert errors_for({"agree": True}, ("agree", "boolean")) == {}
    assert errors_for({"agree": "yes"}, ("agree", "boolean", {"strict": True})) == {
        "agree": ["Agree must be either 1 or 0."]
    }
    assert errors_for({"agree": "1"}, ("agree", "boolean", {"strict": True})) == {}


def test_uuid() -> None:
    """UUID values must use the canonical text form."""

    assert errors_for({"token": "1234"}, ("token", "uuid")) == {
        "token": ["Token must be a valid UUID."]
    }
    assert errors_for({"token": str(uuid.uuid4())}, ("token", "uuid")) == {}


def test_default_value() -> None:
    """Default values fill empty attributes, or all of them when asked."""

    model = DynamicModel(
        {"country": None, "lang": "fr"},
        [
            ("country", "default", {"value": "ID"}),
            ("lang", "default", {"value": "en", "setOnEmpty": False}),
        ],
    )
    assert model.validate() is True
    assert model.country == "ID"
    assert model.lang == "en"


def test_filter() -> None:
    """Filters replace the value with the result of the callable."""

    model = DynamicModel({"name": "  Bob "}, [("name", "filter", {"filter": str.strip})])
    assert model.validate() is True
    assert model.name == "Bob"

    model = DynamicModel({"name": "x"}, [("name", "filter")])
    with pytest.raises(InvalidRuleError, match="filter"):
        model.validate()


def test_inline_validator() -> None:
    """A validator name matching a model method calls that method."""

    class NumberForm(DynamicModel):
        def check_even(self, attribute: str, params: dict[str, Any]) -> None:
            if int(self.get(attribute)) % 2:
                self.add_error(attribute, params.get("message", "odd"))

    model = NumberForm({"number": 3}, [("number", "check_even", {"message": "must be even"})])
    assert model.validate() is False
    assert model.get_error("number") == "must be even"

    model.number = 4
    assert model.validate() is True


@dataclass
class EvenValidator(Validator):
    def validate_attribute(self, model: Any, attribute: str) -> None:
        if int(model.get_attribute_value(attribute)) % 2:
            self.add_error(model, attribute, self.message or "{attribute} must be even.")


def test_validator_class_and_dotted_path() -> None:
    """Validators may be given as classes or importable dotted paths."""

    assert errors_for({"n": 3}, ("n", EvenValidator)) == {"n": ["N must be even."]}
    assert errors_for({"name": "abc"}, ("name", LengthValidator, {"max": 2})) == {
        "name": ["Name is too long (maximum is 2 characters)."]
    }
    assert errors_for(
        {"name": "abc"},
        ("name", "litestar_dynamicmodel.lib.validators.LengthValidator", {"max": 2}),
    ) == {"name": ["Name is too long (maximum is 2 characters)."]}


def test_unknown_validator_or_parameter() -> None:
    """Unresolvable validators and unknown parameters are invalid rules."""

    with pytest.raises(InvalidRuleError, match="Unknown validator"):
        DynamicModel({"a": 1}, [("a", "nonexistent")]).validate()
    with pytest.raises(InvalidRuleError, match="Unable to import"):
        DynamicModel({"a": 1}, [("a", "no.such.module.Validator")]).validate()
    with pytest.raises(InvalidRuleError, match="Unknown parameter 'maxx'"):
        DynamicModel({"a": 1}, [("a", "length", {"maxx": 3})]).validate()


def test_skip_on_error() -> None:
    """A validator marked skipOnError ignores attributes already in error."""

    rules = [("name", "required"), ("name", "length", {"min": 3, "skipOnError": True})]
    assert errors_for({"name": "  "}, *rules) == {"name": ["Name cannot be blank."]}


def test_create_validator_sets_scenarios() -> None:
    """create_validator passes on and except through to the validator."""

    model = DynamicModel(["a"])
    validator = create_validator("length", model, ["a"], {"max": 3}, on=["x"], except_=["y"])
    assert isinstance(validator, LengthValidator)
    assert validator.max == 3
    assert validator.apply_to("x")
    assert not validator.apply_to("y")
    assert not validator.apply_to("")
