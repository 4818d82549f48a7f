"""
Report generators for audit and diagnostics results.

Formats results as console tables.
"""

from typing import Optional

from trailstats.features.gpx import ParsedTrack
from trailstats.features.elevation import TrackStats
from trailstats.features.tracks import SavedTrack
from .schemas import AuditSummary, SourceComparison, Verification


def _fmt_m(value: Optional[float]) -> str:
    return f"{value:.0f}" if value is not None else "-"


def _fmt_pct(value: Optional[float]) -> str:
    return f"{value:+.1f}%" if value is not None else "-"


class ReportGenerator:
    """Generate console reports."""

    def generate_audit_console(self, summary: AuditSummary) -> str:
        """ASCII table of an audit run."""

        lines = [
            "",
            "=" * 70,
            "                     ELEVATION AUDIT",
            "=" * 70,
            "",
            f"Tracks:     {summary.total} (processed: {summary.processed})",
            f"Updated:    {summary.updated}",
            f"Skipped:    {summary.skipped}",
            "",
            f"{'Name':<24} | {'Pts':>5} | {'D+ old':>6} | {'D+ new':>6} | "
            f"{'dD+':>6} | {'dD+ %':>7} | {'D- old':>6} | {'D- new':>6} | Status",
            "-" * 100,
        ]

        for row in summary.rows:
            if row.skipped_reason:
                status = f"skipped ({row.skipped_reason})"
            else:
                status = "updated" if row.updated else "ok"

            lines.append(
                f"{row.name[:24]:<24} | {row.points:>5} | {_fmt_m(row.old_gain):>6} | "
                f"{_fmt_m(row.new_gain):>6} | {row.diff_gain:>+6.0f} | "
                f"{_fmt_pct(row.diff_gain_pct):>7} | {_fmt_m(row.old_loss):>6} | "
                f"{_fmt_m(row.new_loss):>6} | {status}"
            )

        lines.append("")
        return "\n".join(lines)

    def generate_comparison_console(self, comparison: SourceComparison) -> str:
        """ASCII table of an API vs terrain-rgb comparison."""

        lines = [
            "",
            "=" * 70,
            "              ELEVATION SOURCES: API vs TERRAIN-RGB",
            "=" * 70,
            "",
            f"{'Name':<24} | {'Pts':>5} | {'API D+':>6} | {'DEM D+':>6} | {'dD+':>6} | "
            f"{'API D-':>6} | {'DEM D-':>6} | {'dD-':>6}",
            "-" * 85,
        ]

        for row in comparison.rows:
            lines.append(
                f"{row.name[:24]:<24} | {row.points:>5} | {row.api_gain:>6.0f} | "
                f"{row.dem_gain:>6.0f} | {row.d_gain:>+6.0f} | {row.api_loss:>6.0f} | "
                f"{row.dem_loss:>6.0f} | {row.d_loss:>+6.0f}"
            )

        lines.extend([
            "",
            f"Tracks compared: {comparison.count}",
            f"Mean dD+ (DEM - API): {comparison.mean_gain_delta:+.1f} m",
            f"Mean dD- (DEM - API): {comparison.mean_loss_delta:+.1f} m",
            "",
        ])
        return "\n".join(lines)

    def generate_verification_console(self, verification: Verification) -> str:
        """ASCII table of the method x source grid."""

        lines = [
            "",
            "=" * 70,
            f"  VERIFY: {verification.track_name} ({verification.points} points)",
            "=" * 70,
            "",
            f"{'Method':<11} | {'Source':<10} | {'Km':>7} | {'D+':>6} | {'D-':>6} | "
            f"{'Min':>6} | {'Max':>6}",
            "-" * 70,
        ]

        for r in verification.results:
            if r.error:
                lines.append(f"{r.method.value:<11} | {r.source.value:<10} | error: {r.error}")
                continue
            lines.append(
                f"{r.method.value:<11} | {r.source.value:<10} | {r.length_km:>7.2f} | "
                f"{r.gain:>6.0f} | {r.loss:>6.0f} | {r.min_elevation:>6.0f} | "
                f"{r.max_elevation:>6.0f}"
            )

        s = verification.suggested
        lines.append("")
        if s:
            lines.append(
                f"Suggested: {s.method.value} / {s.source.value} "
                f"(D+ {s.gain:.0f} m, D- {s.loss:.0f} m)"
            )
        else:
            lines.append("Suggested: none (all combinations failed)")
        lines.append("")
        return "\n".join(lines)

    def generate_parse_console(self, track: ParsedTrack) -> str:
        """Summary of a decoded GPX file."""
        return "\n".join([
            f"Name:        {track.name or '-'}",
            f"Points:      {track.points_count} (raw: {track.raw_points_count})",
            f"Distance:    {track.distance_km:.2f} km (raw: {track.raw_distance_km:.2f} km)",
            f"Naive D+:    {track.elevation_gain_naive_m:.0f} m",
        ])

    def generate_stats_console(self, stats: TrackStats) -> str:
        """Track statistics block."""
        return "\n".join([
            f"Length:      {stats.length_km:.2f} km",
            f"D+:          {stats.elevation_gain_m:.0f} m",
            f"D-:          {stats.elevation_loss_m:.0f} m",
            f"Elevation:   {stats.min_elevation_m:.0f} - {stats.max_elevation_m:.0f} m",
        ])

    def generate_track_console(self, track: SavedTrack) -> str:
        """One stored track with its cached statistics."""
        return "\n".join([
            f"Track:       {track.name} ({track.id})",
            f"Points:      {len(track.points)}",
            f"Length:      {track.length_km if track.length_km is not None else '-'} km",
            f"D+:          {_fmt_m(track.elevation_gain_m)} m",
            f"D-:          {_fmt_m(track.elevation_loss_m)} m",
        ])
