"""
MatchSheet - team sheet generator

Places a starting line-up on a pitch for the selected formation and exports
the finished sheet as PNG or single-page A4 PDF.
"""

from .models import (
    FieldRole, FormationType, NormalizedPosition, Player, PositionedPlayer,
    Substitute, StaffMember, MatchMetadata, SheetState, ExportArtifact
)
from .formations import get_formation, iter_formations
from .layout import resolve_positions, positioned_lineup
from .document import build_document
from .rasterizer import capture, CaptureError, ExportError
from .exporter import export_png, export_pdf, run_export, EncodeError

__all__ = [
    'FieldRole',
    'FormationType',
    'NormalizedPosition',
    'Player',
    'PositionedPlayer',
    'Substitute',
    'StaffMember',
    'MatchMetadata',
    'SheetState',
    'ExportArtifact',
    'get_formation',
    'iter_formations',
    'resolve_positions',
    'positioned_lineup',
    'build_document',
    'capture',
    'CaptureError',
    'ExportError',
    'export_png',
    'export_pdf',
    'run_export',
    'EncodeError',
]
