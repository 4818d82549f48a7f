"""
CLI interface for elevation tooling.

Usage:
    trailstats parse route.gpx --max-points 500
    trailstats import route.gpx --name "Morning Ridge"
    trailstats audit --force --update
    trailstats verify "Morning Ridge"
"""

import asyncio
import logging
import sys
from pathlib import Path

import click

from trailstats.config import settings
from trailstats.shared import ElevationSource, FilterMethod
from trailstats.db.session import AsyncSessionLocal, init_db
from trailstats.features.gpx import GPXParserService, GPXParseOptions, GPXError
from trailstats.features.elevation import TrackStatsService, ElevationTuning
from trailstats.features.tracks import SQLTrackStore, TrackStatsUpdate
from .schemas import AuditOptions
from .service import ElevationAuditService
from .diagnostics import ElevationDiagnostics
from .report import ReportGenerator

SOURCE_CHOICE = click.Choice([s.value for s in ElevationSource])
METHOD_CHOICE = click.Choice([m.value for m in FilterMethod])


def _tuning(method: str | None) -> ElevationTuning | None:
    return ElevationTuning(method=FilterMethod(method)) if method else None


async def _open_store() -> SQLTrackStore:
    await init_db()
    return SQLTrackStore(AsyncSessionLocal)


def _read_gpx(path: str, options: GPXParseOptions):
    try:
        return GPXParserService.parse(Path(path).read_bytes(), options)
    except GPXError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def cli(verbose):
    """Trail track geometry and elevation tools."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper())
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--no-simplify", is_flag=True, help="Keep every track point")
@click.option("--tolerance", default=None, type=float, help="Simplification tolerance in meters")
@click.option("--max-points", default=None, type=int, help="Cap the number of points")
def parse(path, no_simplify, tolerance, max_points):
    """Decode and simplify a GPX file."""
    kwargs = {"simplify": not no_simplify, "max_points": max_points}
    if tolerance is not None:
        kwargs["tolerance_m"] = tolerance

    track = _read_gpx(path, GPXParseOptions(**kwargs))
    click.echo(ReportGenerator().generate_parse_console(track))


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--source", default=None, type=SOURCE_CHOICE, help="Elevation source")
@click.option("--method", default=None, type=METHOD_CHOICE, help="Gain/loss filter")
def stats(path, source, method):
    """Compute statistics for a GPX file."""
    asyncio.run(_run_stats(path, source, method))


async def _run_stats(path: str, source: str | None, method: str | None):
    track = _read_gpx(path, GPXParseOptions())
    click.echo(ReportGenerator().generate_parse_console(track))
    click.echo()

    result = await TrackStatsService().calculate_track_stats(
        track.points, _tuning(method), source
    )
    click.echo(ReportGenerator().generate_stats_console(result))


@cli.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--name", default=None, help="Track name (defaults to the GPX name)")
@click.option("--source", default=None, type=SOURCE_CHOICE, help="Elevation source")
def import_track(path, name, source):
    """Store a GPX track and compute its statistics."""
    asyncio.run(_run_import(path, name, source))


async def _run_import(path: str, name: str | None, source: str | None):
    track = _read_gpx(path, GPXParseOptions())
    store = await _open_store()

    saved = await store.add_track(
        name=name or track.name or Path(path).stem,
        points=track.points,
        description=track.description,
    )
    result = await TrackStatsService().calculate_track_stats(saved.points, source=source)
    updated = await store.update_stats([TrackStatsUpdate(
        track_id=saved.id,
        elevation_gain_m=result.elevation_gain_m,
        elevation_loss_m=result.elevation_loss_m,
        length_km=result.length_km,
    )])

    click.echo(ReportGenerator().generate_track_console(updated[0] if updated else saved))


@cli.command()
@click.option("--max-tracks", default=None, type=int, help="Only audit the first N tracks")
@click.option("--force", is_flag=True, help="Recalculate tracks that already have stats")
@click.option("--update", is_flag=True, help="Write corrections back to storage")
@click.option("--min-diff-meters", default=None, type=float, help="Absolute update threshold")
@click.option("--min-diff-percent", default=None, type=float, help="Relative update threshold")
@click.option("--batch-delay-ms", default=None, type=int, help="Pause between tracks")
@click.option("--source", default=None, type=SOURCE_CHOICE, help="Elevation source")
@click.option("--method", default=None, type=METHOD_CHOICE)
def audit(max_tracks, force, update, min_diff_meters, min_diff_percent, batch_delay_ms, source, method):
    """
    Recompute elevation stats for stored tracks.

    Prints before/after values; with --update, tracks whose gain or
    loss moved past a threshold are corrected.
    """
    overrides = {
        "min_diff_meters": min_diff_meters,
        "min_diff_percent": min_diff_percent,
        "batch_delay_ms": batch_delay_ms,
    }
    options = AuditOptions(
        max_tracks=max_tracks,
        force_recalculate=force,
        update_storage=update,
        tuning_overrides=_tuning(method),
        source=ElevationSource(source) if source else None,
        **{k: v for k, v in overrides.items() if v is not None},
    )
    asyncio.run(_run_audit(options))


async def _run_audit(options: AuditOptions):
    store = await _open_store()
    summary = await ElevationAuditService(store).audit(options)
    click.echo(ReportGenerator().generate_audit_console(summary))


@cli.command()
@click.argument("id_or_name")
@click.option("--source", default=None, type=SOURCE_CHOICE, help="Elevation source")
@click.option("--method", default=None, type=METHOD_CHOICE)
def recalc(id_or_name, source, method):
    """Recompute and store stats for one track."""
    asyncio.run(_run_recalc(id_or_name, source, method))


async def _run_recalc(id_or_name: str, source: str | None, method: str | None):
    store = await _open_store()
    track = await ElevationAuditService(store).recalc_track(id_or_name, _tuning(method), source)
    if track is None:
        raise click.ClickException(f"Track not found or too short: {id_or_name}")
    click.echo(ReportGenerator().generate_track_console(track))


@cli.command("compare-sources")
@click.option("--max-tracks", default=None, type=int, help="Only compare the first N tracks")
@click.option("--method", default=None, type=METHOD_CHOICE)
def compare_sources(max_tracks, method):
    """Compare API and terrain-rgb gain/loss for stored tracks."""
    asyncio.run(_run_compare(max_tracks, method))


async def _run_compare(max_tracks: int | None, method: str | None):
    store = await _open_store()
    comparison = await ElevationDiagnostics(store).compare_sources(max_tracks, _tuning(method))
    if comparison.count == 0:
        click.echo("No tracks compared.")
        return
    click.echo(ReportGenerator().generate_comparison_console(comparison))


@cli.command()
@click.argument("id_or_name")
def verify(id_or_name):
    """Run every method/source combination for one track."""
    asyncio.run(_run_verify(id_or_name))


async def _run_verify(id_or_name: str):
    store = await _open_store()
    verification = await ElevationDiagnostics(store).verify_track(id_or_name)
    if verification is None:
        raise click.ClickException(f"Track not found or too short: {id_or_name}")
    click.echo(ReportGenerator().generate_verification_console(verification))


@cli.command()
@click.argument("id_or_name")
@click.option("--source", default=None, type=SOURCE_CHOICE, help="Elevation source")
@click.option("--force", is_flag=True, help="Rebuild a cached profile")
def profile(id_or_name, source, force):
    """Print the elevation profile of a stored track."""
    asyncio.run(_run_profile(id_or_name, source, force))


async def _run_profile(id_or_name: str, source: str | None, force: bool):
    store = await _open_store()
    points = await ElevationAuditService(store).refresh_profile(id_or_name, source, force)
    if not points:
        raise click.ClickException(f"Track not found or too short: {id_or_name}")

    click.echo(f"{'Km':>8} | {'Elev':>6}")
    click.echo("-" * 17)
    for p in points:
        click.echo(f"{p.distance_km:>8.3f} | {p.elevation_m:>6.0f}")


if __name__ == "__main__":
    cli()
