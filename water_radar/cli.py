"""
water-radar CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Build the working dataset: seed waters, then each ``--import`` file
     merged in order (last write wins per id).
  4. Score / rank / format.
  5. Print the result to stdout.

Install and run::

    pip install -e .
    water-radar --help
    water-radar validate-config
    water-radar list --group Europe --tds-max 500
    water-radar score evian --profile Kid
    water-radar compare evian volvic borjomi --profile Pressure
    water-radar rotation evian volvic baikal
    water-radar import labels.csv --out data/merged.json --format json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="water-radar",
    help="Bottled water scoring, ranking and comparison.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from water_radar.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from water_radar.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _resolve_profile_or_exit(raw: Optional[str], config):
    from water_radar.taxonomy.water_taxonomy import Profile, lookup_enum

    if raw is None:
        return config.default_profile
    profile = lookup_enum(Profile, raw)
    if profile is None:
        valid = ", ".join(p.value for p in Profile)
        typer.echo(f"[ERROR] Unknown profile '{raw}'. Valid: {valid}", err=True)
        raise typer.Exit(code=1)
    return profile


def _read_import_file(path: Path):
    """Parse one import file, exiting with a readable error on failure."""
    from water_radar.ingestion.importer import ImportParseError, parse_import_text

    if not path.exists():
        typer.echo(f"[ERROR] Import file not found: {path}", err=True)
        raise typer.Exit(code=1)
    try:
        return parse_import_text(path.read_text(encoding="utf-8-sig"))
    except ImportParseError as exc:
        typer.echo(f"[ERROR] {path.name}: {exc}", err=True)
        raise typer.Exit(code=1)


def _build_dataset(config, import_files: Optional[list[str]]):
    """Seed waters with every ``--import`` file merged in order."""
    from water_radar.config import resolve_path
    from water_radar.ingestion.importer import ImportParseError, merge_by_id
    from water_radar.seed_loader import load_seed_waters

    try:
        waters = load_seed_waters(resolve_path(config.data.seed_file))
    except (FileNotFoundError, ImportParseError) as exc:
        typer.echo(f"[ERROR] Seed data: {exc}", err=True)
        raise typer.Exit(code=1)

    for name in import_files or []:
        waters = merge_by_id(waters, _read_import_file(Path(name)))
    return waters


def _select_or_exit(waters, water_ids: list[str], limit: int):
    from water_radar.selection import resolve_selection

    unknown = [i for i in water_ids if i not in {w.id for w in waters}]
    if unknown:
        typer.echo(f"[ERROR] Unknown water id(s): {', '.join(unknown)}", err=True)
        raise typer.Exit(code=1)
    if len(dict.fromkeys(water_ids)) > limit:
        typer.echo(f"[ERROR] At most {limit} waters can be compared.", err=True)
        raise typer.Exit(code=1)
    return resolve_selection(waters, list(dict.fromkeys(water_ids)))


_CONFIG_OPTION = typer.Option(None, "--config", help="Path to TOML config file.")
_IMPORT_OPTION = typer.Option(
    None, "--import", help="CSV/JSON file merged into the seed set (repeatable)."
)
_PROFILE_OPTION = typer.Option(
    None, "--profile", help="Everyday, Pressure, Sport, Sensitive or Kid."
)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPTION,
    show_full: bool = typer.Option(False, "--full", help="Print full config as JSON."),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Seed file:        {config.data.seed_file}")
    typer.echo(f"  Default profile:  {config.selection.default_profile}")
    typer.echo(f"  Max compare:      {config.selection.max_compare}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("list")
def list_waters(
    query: str = typer.Option("", "--query", "-q", help="Brand name substring."),
    group: Optional[str] = typer.Option(None, "--group", help="Russia, Europe or Therapeutic."),
    verified: bool = typer.Option(False, "--verified", help="Only high-confidence data."),
    tds_max: Optional[float] = typer.Option(None, "--tds-max", help="Upper TDS bound (mg/L)."),
    import_files: Optional[list[str]] = _IMPORT_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """List the catalog with the picker filters applied."""
    from water_radar.reporting.formatters import format_catalog
    from water_radar.selection import filter_catalog
    from water_radar.taxonomy.water_taxonomy import WaterGroup, lookup_enum

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    group_filter = None
    if group is not None:
        group_filter = lookup_enum(WaterGroup, group)
        if group_filter is None:
            typer.echo(f"[ERROR] Unknown group '{group}'.", err=True)
            raise typer.Exit(code=1)

    waters = _build_dataset(config, import_files)
    filtered = filter_catalog(
        waters,
        query=query,
        group=group_filter,
        only_verified=verified,
        tds_max=config.selection.tds_max if tds_max is None else tds_max,
    )
    typer.echo(format_catalog(filtered))


@app.command("score")
def score(
    water_id: str = typer.Argument(..., help="Water id, e.g. 'evian'."),
    profile: Optional[str] = _PROFILE_OPTION,
    import_files: Optional[list[str]] = _IMPORT_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Score one water and explain the result."""
    from water_radar.achievements import get_achievements
    from water_radar.reporting.formatters import format_score_card
    from water_radar.scoring.scorer import score_water

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    active = _resolve_profile_or_exit(profile, config)

    waters = _build_dataset(config, import_files)
    [water] = _select_or_exit(waters, [water_id], limit=1)

    result = score_water(water, active)
    typer.echo(format_score_card(water, result, active, get_achievements(water)))


@app.command("compare")
def compare(
    water_ids: list[str] = typer.Argument(..., help="Two or more water ids."),
    profile: Optional[str] = _PROFILE_OPTION,
    import_files: Optional[list[str]] = _IMPORT_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Rank the selected waters and pick the best daily choice."""
    from water_radar.reporting.formatters import format_metrics_table, format_ranking_table
    from water_radar.scoring.ranker import pick_winner, rank_waters

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    active = _resolve_profile_or_exit(profile, config)

    waters = _build_dataset(config, import_files)
    selection = _select_or_exit(waters, water_ids, config.selection.max_compare)
    if len(selection) < 2:
        typer.echo("[ERROR] Select at least two different waters to compare.", err=True)
        raise typer.Exit(code=1)

    ranked = rank_waters(selection, active)
    typer.echo(format_ranking_table(ranked, active, pick_winner(selection, active)))
    typer.echo(format_metrics_table([rw.water for rw in ranked]))


@app.command("rotation")
def rotation(
    water_ids: list[str] = typer.Argument(..., help="Water ids to rotate between."),
    profile: Optional[str] = _PROFILE_OPTION,
    days: Optional[int] = typer.Option(None, "--days", min=1, help="Plan length in days."),
    import_files: Optional[list[str]] = _IMPORT_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Print a simple alternating plan using the two best non-therapeutic waters."""
    from water_radar.reporting.formatters import format_rotation_plan
    from water_radar.scoring.ranker import build_rotation_plan

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    active = _resolve_profile_or_exit(profile, config)

    waters = _build_dataset(config, import_files)
    selection = _select_or_exit(waters, water_ids, config.selection.max_compare)
    plan = build_rotation_plan(selection, active, days or config.selection.rotation_days)
    typer.echo(format_rotation_plan(plan, active))


@app.command("import")
def import_file(
    source: str = typer.Argument(..., help="CSV or JSON file to import."),
    out: Optional[str] = typer.Option(None, "--out", help="Write the merged dataset here."),
    fmt: str = typer.Option("json", "--format", help="Export format: csv or json."),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Parse a CSV/JSON file and merge it into the seed dataset by id."""
    from water_radar.ingestion.importer import merge_by_id
    from water_radar.reporting.export import export_waters_csv, export_waters_json, write_export

    if fmt not in ("csv", "json"):
        typer.echo(f"[ERROR] --format must be 'csv' or 'json', got '{fmt}'.", err=True)
        raise typer.Exit(code=1)

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    base = _build_dataset(config, None)
    incoming = _read_import_file(Path(source))
    base_ids = {w.id for w in base}
    replaced = sum(1 for w in incoming if w.id in base_ids)
    merged = merge_by_id(base, incoming)

    typer.echo(f"  Parsed {len(incoming)} water(s) from {Path(source).name}.")
    typer.echo(f"  Replaced {replaced}, added {len(merged) - len(base)}.")
    typer.echo(f"  Dataset size: {len(merged)}.")

    if out:
        text = export_waters_csv(merged) if fmt == "csv" else export_waters_json(merged)
        written = write_export(text, Path(out))
        typer.echo(f"  Wrote {fmt.upper()} export to {written}.")

    typer.echo("[OK] Import complete.")


if __name__ == "__main__":
    app()
