"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer

from powerplanctl.core.config_loader import load_config
from powerplanctl.core.errors import PowerPlanError
from powerplanctl.core.model import Plan, Setting, SubGroup
from powerplanctl.core.service import AC, PowerCfgService

app = typer.Typer(help="Query and change Windows power plans through powercfg")


@dataclass
class CliState:
    host: str | None = None
    config_path: Path | None = None


@app.callback()
def main(
    ctx: typer.Context,
    host: str | None = typer.Option(None, "--host", help="Configured host profile or ssh destination"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log commands to stderr"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = CliState(host=host, config_path=config)


def _build_service(ctx: typer.Context) -> PowerCfgService:
    state: CliState = ctx.obj or CliState()
    loaded = load_config(state.config_path)
    for warning in loaded.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    return PowerCfgService(host=state.host, config=loaded.config)


def _plan_line(plan: Plan) -> str:
    marker = "*" if plan.active else " "
    line = f"{marker} {plan.name}  {plan.id}"
    if plan.description:
        line += f"  {plan.description}"
    return line


def _echo_plans(plans: list[Plan]) -> None:
    if not plans:
        typer.echo("No power plans found")
        return
    for plan in plans:
        typer.echo(_plan_line(plan))


def _setting_lines(setting: Setting, indent: str = "") -> list[str]:
    lines = [f"{indent}{setting.name}  {setting.id}"]
    lines.append(f"{indent}  AC: {setting.current_ac}  DC: {setting.current_dc}")
    if setting.options:
        options = ", ".join(f"{name}={index}" for name, index in setting.options.items())
        lines.append(f"{indent}  options: {options}")
    if setting.range:
        lines.append(f"{indent}  range: {setting.range.minimum}..{setting.range.maximum}")
    return lines


def _echo_subgroup(subgroup: SubGroup) -> None:
    typer.echo(f"{subgroup.name}  {subgroup.id}")
    for setting in subgroup.settings:
        for line in _setting_lines(setting, indent="  "):
            typer.echo(line)


@app.command("plans")
def list_plans(ctx: typer.Context) -> None:
    """List power plans; the active plan is marked with '*'."""
    try:
        service = _build_service(ctx)
        _echo_plans(service.list_plans())
    except PowerPlanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("show")
def show_plan(
    ctx: typer.Context,
    plan: str | None = typer.Argument(None, help="Plan name (default: active plan)"),
    subgroup: str | None = typer.Option(None, "--subgroup", "-g", help="Subgroup name filter"),
    setting: str | None = typer.Option(None, "--setting", "-s", help="Setting name filter"),
) -> None:
    """Show subgroups and settings of a plan."""
    try:
        service = _build_service(ctx)
        resolved, subgroups = service.snapshot(plan, subgroup, setting)
        typer.echo(f"Plan: {_plan_line(resolved).strip()}")
        for group in subgroups:
            _echo_subgroup(group)
    except PowerPlanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("set")
def set_value(
    ctx: typer.Context,
    subgroup: str,
    setting: str,
    value: str,
    plan: str | None = typer.Option(None, "--plan", help="Plan name (default: active plan)"),
    ac: bool = typer.Option(True, "--ac/--no-ac", help="Write the plugged-in value"),
    dc: bool = typer.Option(True, "--dc/--no-dc", help="Write the on-battery value"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Set a setting to an integer value or option name.

    Each selected power state is confirmed separately unless --yes is given.
    """

    def _confirm(state: str, current: Setting, index: int) -> bool:
        old = current.current_ac if state == AC else current.current_dc
        return typer.confirm(f"Change {state} value of '{current.name}' from {old} to {index}?")

    try:
        service = _build_service(ctx)
        result = service.set_value(
            plan,
            subgroup,
            setting,
            value,
            ac=ac,
            dc=dc,
            confirm=None if yes else _confirm,
        )
        for line in _setting_lines(result):
            typer.echo(line)
    except PowerPlanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("activate")
def activate_plan(ctx: typer.Context, plan: str) -> None:
    """Make a plan the active plan."""
    try:
        service = _build_service(ctx)
        _echo_plans(service.activate(plan))
    except PowerPlanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("delete")
def delete_plan(
    ctx: typer.Context,
    plan: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a plan."""
    try:
        service = _build_service(ctx)
        target = service.get_plan(plan)
        if not yes and not typer.confirm(f"Delete power plan '{target.name}'?"):
            typer.echo("Aborted")
            return
        _echo_plans(service.delete(plan))
    except PowerPlanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("duplicate")
def duplicate_plan(ctx: typer.Context, plan: str) -> None:
    """Copy a plan as '<name>-Copy'."""
    try:
        service = _build_service(ctx)
        _echo_plans(service.duplicate(plan))
    except PowerPlanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("rename")
def rename_plan(
    ctx: typer.Context,
    plan: str,
    new_name: str,
    description: str | None = typer.Option(None, "--description", help="New plan description"),
) -> None:
    """Rename a plan and optionally change its description.

    Put `--` before a plan name that starts with `-`.
    """
    try:
        service = _build_service(ctx)
        _echo_plans(service.rename(plan, new_name, description))
    except PowerPlanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
