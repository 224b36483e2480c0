"""Developer command line interface for SeerEngine.

Every command prints JSON so results can be piped into other tools.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Sequence

import click
import typer
import yaml
from pydantic import ValidationError

from .boot.logging import configure_logging
from .cache import ChartCache
from .chart.natal import BirthRecord, NatalChart, build_chart
from .config.settings import Settings, config_path, load_settings, save_settings
from .core.time import Instant
from .decision.classifier import CRISIS_RESPONSE, detect_crisis, validate_question
from .decision.engine import decide
from .ephemeris.provider import get_provider
from .exceptions import SeerEngineError
from .scoring.report import DailyReport, build_daily_report
from .synastry.bond import todays_bond
from .synastry.engine import synastry

app = typer.Typer(help="SeerEngine command line interface.", no_args_is_help=True)
config_app = typer.Typer(help="Inspect and initialise the settings file.")
app.add_typer(config_app, name="config")

_STATE: dict[str, Any] = {}


def _echo(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def _settings() -> Settings:
    settings = _STATE.get("settings")
    if settings is None:
        settings = load_settings(_STATE.get("config"))
        _STATE["settings"] = settings
    return settings


def _build(birth: BirthRecord, provider: Any) -> NatalChart:
    settings = _settings()
    return build_chart(
        birth,
        provider,
        orbs=settings.orbs.table("natal"),
        include_chiron=settings.ephemeris.include_chiron,
    )


def _cache() -> ChartCache:
    cache = _STATE.get("cache")
    if cache is None:
        cache = ChartCache(_settings().cache.max_entries, builder=_build)
        _STATE["cache"] = cache
    return cache


def _birth(payload: dict[str, Any]) -> BirthRecord:
    try:
        return BirthRecord.model_validate({k: v for k, v in payload.items() if v is not None})
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _birth_from_file(path: Path) -> BirthRecord:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise typer.BadParameter(f"could not read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{path} must contain a mapping of birth fields")
    return _birth(data)


def _chart(birth: BirthRecord) -> NatalChart:
    settings = _settings()
    provider = get_provider(settings.ephemeris.provider)
    if not settings.cache.enabled:
        return _build(birth, provider)
    return _cache().get(birth, provider)


def _instant(at: Optional[str]) -> Instant:
    if not at:
        return Instant.now()
    try:
        return Instant.from_datetime(datetime.fromisoformat(at))
    except ValueError as exc:
        raise typer.BadParameter(f"invalid ISO-8601 timestamp: {at}") from exc


def _report(birth: BirthRecord, at: Optional[str], profile: str) -> DailyReport:
    settings = _settings()
    return build_daily_report(
        _chart(birth),
        _instant(at),
        profile or birth.name,
        get_provider(settings.ephemeris.provider),
        orbs=settings.orbs.table("transit"),
    )


_NAME = typer.Option("", "--name", help="Display name.")
_DATE = typer.Option(..., "--date", help="Birth date (YYYY-MM-DD).")
_TIME = typer.Option(None, "--time", help="Local birth time (HH:MM); noon when omitted.")
_LAT = typer.Option(..., "--lat", help="Latitude in degrees, north positive.")
_LON = typer.Option(..., "--lon", help="Longitude in degrees, east positive.")
_OFFSET = typer.Option(0.0, "--utc-offset", help="UTC offset in hours at birth.")


@app.callback()
def _main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="Settings file to use."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL."),
) -> None:
    _STATE.clear()
    _STATE["config"] = config
    default_level = None
    # "config init" must not create the file as a side effect of loading it.
    if ctx.invoked_subcommand != "config":
        try:
            default_level = _settings().logging.level
        except SeerEngineError as exc:
            typer.secho(str(exc), fg=typer.colors.RED, err=True)
            raise typer.Exit(2) from exc
    configure_logging(level=log_level, default=default_level)


@app.command("chart")
def chart_cmd(
    name: str = _NAME,
    date: str = _DATE,
    time: Optional[str] = _TIME,
    lat: float = _LAT,
    lon: float = _LON,
    utc_offset: float = _OFFSET,
) -> None:
    """Compute and print a natal chart."""

    birth = _birth(
        {"name": name, "date": date, "time": time, "latitude": lat, "longitude": lon, "utc_offset_hours": utc_offset}
    )
    _echo(_chart(birth).as_dict())


@app.command("daily")
def daily_cmd(
    name: str = _NAME,
    date: str = _DATE,
    time: Optional[str] = _TIME,
    lat: float = _LAT,
    lon: float = _LON,
    utc_offset: float = _OFFSET,
    at: Optional[str] = typer.Option(None, "--at", help="Reading time (ISO-8601); now when omitted."),
    profile: str = typer.Option("", "--profile", help="Profile identifier for the report."),
) -> None:
    """Print the daily report for one birth record."""

    birth = _birth(
        {"name": name, "date": date, "time": time, "latitude": lat, "longitude": lon, "utc_offset_hours": utc_offset}
    )
    _echo(_report(birth, at, profile).as_dict())


@app.command("ask")
def ask_cmd(
    question: str = typer.Argument(..., help="Question to answer."),
    name: str = _NAME,
    date: str = _DATE,
    time: Optional[str] = _TIME,
    lat: float = _LAT,
    lon: float = _LON,
    utc_offset: float = _OFFSET,
    at: Optional[str] = typer.Option(None, "--at", help="Reading time (ISO-8601); now when omitted."),
    mode: Optional[str] = typer.Option(None, "--mode", help="yes_no or guidance."),
) -> None:
    """Answer a yes/no question against today's report."""

    if detect_crisis(question):
        _echo({"crisis": True, "message": CRISIS_RESPONSE})
        return
    check = validate_question(question)
    if not check:
        raise typer.BadParameter(f"{check.error}. {check.suggestion}", param_hint="QUESTION")

    settings = _settings()
    birth = _birth(
        {"name": name, "date": date, "time": time, "latitude": lat, "longitude": lon, "utc_offset_hours": utc_offset}
    )
    report = _report(birth, at, "")
    try:
        result = decide(
            question,
            report,
            mode or settings.decision.default_mode,
            confidence_floor=settings.decision.confidence_floor,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    _echo(result.as_dict())


@app.command("synastry")
def synastry_cmd(
    first: Path = typer.Argument(..., help="YAML/JSON file with the first birth record."),
    second: Path = typer.Argument(..., help="YAML/JSON file with the second birth record."),
) -> None:
    """Score the compatibility of two birth records."""

    settings = _settings()
    chart_a = _chart(_birth_from_file(first))
    chart_b = _chart(_birth_from_file(second))
    _echo(synastry(chart_a, chart_b, orbs=settings.orbs.table("synastry")).as_dict())


@app.command("bond")
def bond_cmd(
    first: Path = typer.Argument(..., help="YAML/JSON file with the first birth record."),
    second: Path = typer.Argument(..., help="YAML/JSON file with the second birth record."),
    at: Optional[str] = typer.Option(None, "--at", help="Reading time (ISO-8601); now when omitted."),
) -> None:
    """Read today's bond between two birth records."""

    settings = _settings()
    chart_a = _chart(_birth_from_file(first))
    chart_b = _chart(_birth_from_file(second))
    report = synastry(chart_a, chart_b, orbs=settings.orbs.table("synastry"))
    bond = todays_bond(
        chart_a,
        chart_b,
        report,
        _instant(at),
        get_provider(settings.ephemeris.provider),
        orbs=settings.orbs.table("transit"),
    )
    _echo(bond.as_dict())


@config_app.command("show")
def config_show() -> None:
    """Print the effective settings."""

    _echo(_settings().model_dump(mode="json"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Write a default settings file."""

    target = _STATE.get("config") or config_path()
    target = Path(target)
    if target.exists() and not force:
        typer.secho(f"{target} already exists (use --force to overwrite)", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(1)
    written = save_settings(Settings(), target)
    _echo({"path": str(written)})


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return a process exit code."""

    args: Optional[List[str]] = list(argv) if argv is not None else None
    try:
        result = app(args=args, prog_name="seerengine", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        return 1
    except SeerEngineError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        return 1
    return result if isinstance(result, int) else 0


__all__ = ["app", "main"]
