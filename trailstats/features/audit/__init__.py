"""
Audit and diagnostics module.

Usage:
    from trailstats.features.audit import ElevationAuditService, AuditOptions
    from trailstats.features.audit import ElevationDiagnostics

Components:
- ElevationAuditService: Batch recompute with threshold-gated write-back
- ElevationDiagnostics: Source comparison, method x source verification
- ReportGenerator: Console tables
- cli: `trailstats` command group
"""

from .schemas import (
    AuditOptions,
    AuditRow,
    AuditSummary,
    SourceComparison,
    SourceComparisonRow,
    Verification,
    VerificationRow,
)
from .service import ElevationAuditService, build_audit_row
from .diagnostics import ElevationDiagnostics, suggest_combination
from .report import ReportGenerator

__all__ = [
    # Schemas
    "AuditOptions",
    "AuditRow",
    "AuditSummary",
    "SourceComparison",
    "SourceComparisonRow",
    "Verification",
    "VerificationRow",
    # Services
    "ElevationAuditService",
    "build_audit_row",
    "ElevationDiagnostics",
    "suggest_combination",
    # Reports
    "ReportGenerator",
]
