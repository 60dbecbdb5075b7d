# CLI for the jailbreak compatibility checker
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from jailbreak_compat import __version__, catalog, models, resolver, rules, utils

app = typer.Typer(help="Check which jailbreak tools work on an iPhone, iPad or iPod touch")
console = Console()


@app.callback()
def _main_callback(
    ctx: typer.Context,
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for session log files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    catalog_file: Optional[Path] = typer.Option(None, "--catalog", help="JSON device catalog to use instead of the built-in one"),
) -> None:
    utils.configure_logging(log_dir=log_dir, verbose=verbose)
    ctx.ensure_object(dict)
    if catalog_file is not None:
        try:
            device_catalog = catalog.DeviceCatalog.from_json(catalog_file)
        except catalog.CatalogError as exc:
            _emit_error(exc, json_out=False)
            return
        ctx.obj["resolver"] = resolver.CompatibilityResolver(catalog=device_catalog)


def echo_json(data):
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


def _active_resolver(ctx: typer.Context) -> resolver.CompatibilityResolver:
    if ctx.obj and ctx.obj.get("resolver") is not None:
        return ctx.obj["resolver"]
    return resolver.default_resolver()


def _emit_error(exc: catalog.CatalogError, json_out: bool) -> None:
    if json_out:
        payload = {"error": str(exc)}
        if exc.payload:
            payload.update(exc.payload)
        echo_json(payload)
    else:
        typer.echo(str(exc), err=True)
        for detail in exc.payload.get("errors", [])[:5]:
            typer.echo(f"  {detail}", err=True)
    raise typer.Exit(exc.exit_code)


def _format_storage(options) -> str:
    return ", ".join(f"{size // 1024}TB" if size >= 1024 else f"{size}GB" for size in options) or "?"


def _rule_summary(rule: rules.ToolRule) -> dict:
    return {
        "name": rule.name,
        "type": rule.type,
        "website": rule.website,
        "notes": rule.notes,
        "fallback_for": rule.fallback_for,
        "tiers": [
            {
                "chips": tier.chips.describe(),
                "versions": [window.describe() for window in tier.ranges],
                "notes": tier.notes,
            }
            for tier in rule.tiers
        ],
    }


def _print_verdict(verdict: models.CompatibilityVerdict, ios_version: str) -> None:
    if verdict.device is None:
        typer.echo(verdict.notes or "Device not found.")
        return

    typer.echo(f"Device: {verdict.device.name} ({verdict.device.chip})")
    typer.echo(f"Status: {models.status_label(verdict.status)} ({verdict.status})")
    if verdict.matched_tools:
        table = Table(title=f"Jailbreak tools for iOS {ios_version}")
        table.add_column("Tool")
        table.add_column("Type")
        table.add_column("Notes")
        for tool in verdict.matched_tools:
            table.add_row(tool.name, tool.type, tool.notes or "")
        console.print(table)
    else:
        typer.echo(f"No jailbreak tools for iOS {ios_version}.")
    if verdict.notes:
        typer.echo(f"Note: {verdict.notes}")


@app.command()
def version(json_out: bool = typer.Option(False, "--json", help="JSON output")):
    if json_out:
        echo_json({"version": __version__})
    else:
        typer.echo(f"jailbreak-compat v{__version__}")


@app.command()
def check(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Device model, e.g. 'iPhone 8' or 'Apple iPad (6th Gen)'"),
    ios_version: str = typer.Argument(..., metavar="VERSION", help="iOS version, e.g. 14.8.1"),
    identifier: bool = typer.Option(False, "--identifier", help="Treat MODEL as a product type such as iPhone10,1"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
):
    active = _active_resolver(ctx)
    if identifier:
        verdict = active.resolve_identifier(model, ios_version)
    else:
        verdict = active.resolve(model, ios_version)

    if json_out:
        echo_json(verdict.model_dump(mode="json"))
    else:
        _print_verdict(verdict, ios_version)
    raise typer.Exit(3 if verdict.status == "UNKNOWN" else 0)


@app.command(name="device")
def device_cmd(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Device model"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
):
    try:
        record = _active_resolver(ctx).catalog.require(model)
    except catalog.CatalogError as exc:
        _emit_error(exc, json_out)
        return

    if json_out:
        echo_json(record.model_dump(mode="json"))
        return

    data = record.model_dump(mode="python")
    data["storage_options"] = _format_storage(record.storage_options)
    for key in ("identifiers", "model_numbers"):
        data[key] = ", ".join(data[key]) or "-"
    for key, value in data.items():
        if value is not None:
            typer.echo(f"{key}: {value}")


@app.command(name="devices")
def devices_cmd(
    ctx: typer.Context,
    family: Optional[str] = typer.Option(None, "--family", help="iPhone | iPod touch | iPad"),
    search: Optional[str] = typer.Option(None, "--search", help="Substring filter on the model name"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
):
    device_catalog = _active_resolver(ctx).catalog
    records = device_catalog.sorted_for_listing(family=family)
    if search:
        matches = set(device_catalog.search(search))
        records = [record for record in records if record in matches]

    if json_out:
        echo_json([record.model_dump(mode="json") for record in records])
        raise typer.Exit(0)

    if not records:
        typer.echo("No devices found.")
        raise typer.Exit(0)

    table = Table(title="Supported devices")
    table.add_column("Model")
    table.add_column("Chip")
    table.add_column("Year")
    table.add_column("Storage")
    table.add_column("Bootrom")
    for record in records:
        table.add_row(
            record.name,
            record.chip,
            str(record.release_year),
            _format_storage(record.storage_options),
            "yes" if record.has_bootrom_exploit else "no",
        )
    console.print(table)


@app.command(name="tools")
def tools_cmd(ctx: typer.Context, json_out: bool = typer.Option(False, "--json", help="JSON output")):
    table_rules = _active_resolver(ctx).rules
    if json_out:
        echo_json([_rule_summary(rule) for rule in table_rules])
        raise typer.Exit(0)

    table = Table(title="Jailbreak tools")
    table.add_column("Tool")
    table.add_column("Type")
    table.add_column("Chips")
    table.add_column("iOS")
    for rule in table_rules:
        for index, tier in enumerate(rule.tiers):
            table.add_row(
                rule.name if index == 0 else "",
                rule.type if index == 0 else "",
                tier.chips.describe(),
                ", ".join(window.describe() for window in tier.ranges),
            )
    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
