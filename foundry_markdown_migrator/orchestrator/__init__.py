"""
Orchestration package for coordinating import pipeline phases.

This package provides the orchestration layer that sequences all import
phases: Fetch → Build → Resolve → Rewrite → Relocate → Write → Report.
"""

from .import_orchestrator import ImportOrchestrator, resolve_data_root
from .import_report import ImportReport

__all__ = [
    'ImportOrchestrator',
    'ImportReport',
    'resolve_data_root'
]
