# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

__copyright__ = "(C) 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>"
__author__ = "trimarsanto@gmail.com"
__license__ = "MPL-2.0"

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import InvalidRuleError


_separator_re = re.compile(r"[\s,]+")


def split_names(value: str | Iterable[str] | None) -> list[str]:
    """Split a comma and/or whitespace separated string into names.

    Args:
        value: a string such as "name, email", or an already split list.

    Returns:
        A list of names, with empty tokens discarded.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [token for token in _separator_re.split(value) if token]
    return list(value)


def merge_names(result: list[str], names: Iterable[str]) -> list[str]:
    """Append names to result, keeping first-seen order and skipping duplicates."""
    seen = set(result)
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result


@dataclass
class Rule:
    """A normalized validation rule descriptor.

    `on` and `except_` are None when the rule does not declare them, which is
    different from declaring an empty scenario set.
    """

    attributes: list[str]
    validator: Any
    on: list[str] | None = None
    except_: list[str] | None = None
    params: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.attributes is None or self.validator is None:
            raise InvalidRuleError(rule=self)
        self.attributes = split_names(self.attributes)
        if self.on is not None:
            self.on = split_names(self.on)
        if self.except_ is not None:
            self.except_ = split_names(self.except_)

    def applies_to(self, scenario: str) -> bool:
        if self.on is not None and scenario not in self.on:
            return False
        if self.except_ is not None and scenario in self.except_:
            return False
        return True


def normalize_rule(rule: Any) -> Rule:
    """
    Convert a rule descriptor into a Rule instance.

    A descriptor is either a Rule, a sequence of (attributes, validator,
    params...) where each params item is a mapping, or a mapping holding
    the attributes and validator under keys 0 and 1 (or "attributes" and
    "validator") with every other key treated as a parameter.

    :param rule: the rule descriptor
    :type rule: Any
    :return: the normalized rule
    :rtype: Rule
    :raises InvalidRuleError: if attributes or validator is missing
    """

    if isinstance(rule, Rule):
        return rule

    if isinstance(rule, Mapping):
        params = dict(rule)
        attributes = params.pop(0, None)
        if attributes is None:
            attributes = params.pop("attributes", None)
        validator = params.pop(1, None)
        if validator is None:
            validator = params.pop("validator", None)

    elif isinstance(rule, (list, tuple)):
        attributes = rule[0] if len(rule) > 0 else None
        validator = rule[1] if len(rule) > 1 else None
        params = {}
        for item in rule[2:]:
            if not isinstance(item, Mapping):
                raise InvalidRuleError(
                    f"Invalid validation rule parameter {item!r}, "
                    "parameters must be given as a mapping.",
                    rule=rule,
                )
            params.update(item)

    else:
        raise InvalidRuleError(rule=rule)

    if attributes is None or validator is None:
        raise InvalidRuleError(rule=rule)

    on = params.pop("on", None)
    except_ = params.pop("except", params.pop("except_", None))

    return Rule(
        attributes=attributes,
        validator=validator,
        on=on,
        except_=except_,
        params=params,
    )


def get_attributes_from_rules(rules: Iterable[Any], scenario: str = "") -> list[str]:
    """
    Collect the names of attributes validated under the given scenario.

    A rule is skipped when it declares "on" and the scenario is not listed,
    or when it declares "except" and the scenario is listed. Both checks apply
    when a rule declares both.

    :param rules: the rule descriptors
    :param scenario: the scenario name
    :return: attribute names, in first-seen order and without duplicates
    :raises InvalidRuleError: if any rule lacks attributes or a validator
    """

    result: list[str] = []
    for rule in rules:
        rule = normalize_rule(rule)
        if not rule.applies_to(scenario):
            continue
        merge_names(result, rule.attributes)
    return result


# EOF
