# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn

import click
from litestar.serialization import decode_json

from litestar_dynamicmodel.cli.debugging import META_IPDB_FLAG, DynModelGroup
from litestar_dynamicmodel.dynamicmodel import DynamicModel
from litestar_dynamicmodel.lib.exceptions import (
    DynamicModelError,
    ModelValidationError,
)
from litestar_dynamicmodel.lib.rules import merge_names


@click.group(
    name="dynmodel",
    invoke_without_command=False,
    help="validate ad hoc data against dynamic model rules",
    cls=DynModelGroup,
)
@click.option(
    "--ipdb/--no-ipdb",
    "use_ipdb",
    default=False,
    show_default=True,
    help="Drop into ipdb if a command raises an unhandled exception.",
)
def dynmodel(use_ipdb: bool) -> None:
    """Validate data with DynamicModel."""

    ctx = click.get_current_context()
    ctx.meta[META_IPDB_FLAG] = use_ipdb


def load_json(path: str) -> Any:
    try:
        return decode_json(Path(path).read_bytes())
    except Exception as exc:
        raise click.BadParameter(f"{path} is not a valid JSON file: {exc}") from exc


def load_rules(path: str) -> list[Any]:
    rules = load_json(path)
    if not isinstance(rules, list):
        raise click.BadParameter(f"{path} must contain a JSON list of rules")
    return rules


def parse_pairs(pairs: tuple[str, ...], what: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"{what} must be given as name=value: {pair}")
        name, value = pair.split("=", 1)
        values[name.strip()] = value
    return values


@dynmodel.command(name="validate", help="validate data against a rules file")
@click.argument("rules_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-a",
    "--attribute",
    "assignments",
    multiple=True,
    help="Attribute value as name=value, may be repeated.",
)
@click.option(
    "--data",
    "data_file",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file holding an object of attribute values.",
)
@click.option(
    "-l",
    "--label",
    "labels",
    multiple=True,
    help="Attribute label as name=label, may be repeated.",
)
@click.option("--scenario", default="", help="Scenario to validate in.")
@click.option(
    "--safe-only/--unsafe",
    default=True,
    show_default=True,
    help="Only assign attributes covered by a rule of the scenario.",
)
def validate_data(
    rules_file: str,
    assignments: tuple[str, ...],
    data_file: str | None,
    labels: tuple[str, ...],
    scenario: str,
    safe_only: bool,
) -> None:
    """Validate attribute values and print the errors, if any."""

    rules = load_rules(rules_file)

    data: dict[str, Any] = {}
    if data_file:
        loaded = load_json(data_file)
        if not isinstance(loaded, dict):
            raise click.BadParameter(f"{data_file} must contain a JSON object")
        data.update(loaded)
    data.update(parse_pairs(assignments, "attribute"))

    try:
        names = DynamicModel.get_attributes_from_rules(rules, scenario)
        model = DynamicModel(
            merge_names(names, data),
            rules,
            parse_pairs(labels, "label"),
            scenario=scenario,
        )
        model.set_attributes(data, safe_only=safe_only)
        model.validate_or_raise()

    except ModelValidationError as exc:
        for message, attribute in exc.error_list:
            click.echo(f"{attribute}: {message}")
        click.get_current_context().exit(1)

    except DynamicModelError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo("OK")


@dynmodel.command(name="attributes", help="list attributes validated by rules")
@click.argument("rules_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--scenario", default="", help="Scenario to list attributes for.")
def list_attributes(rules_file: str, scenario: str) -> None:
    """List the attributes that rules validate in a scenario."""

    rules = load_rules(rules_file)
    try:
        names = DynamicModel.get_attributes_from_rules(rules, scenario)
    except DynamicModelError as exc:
        raise click.ClickException(str(exc)) from exc

    if not names:
        click.echo("No attributes are validated in this scenario.")
        return

    for name in names:
        click.echo(name)


def main() -> NoReturn:
    """
    CLI entry point for dynmodel standalone command
    """

    dynmodel()


# EOF
