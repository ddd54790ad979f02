"""
Exporter: turns a captured sheet into a downloadable PNG or A4 PDF.

Each export is two strictly sequential stages. The document is captured
into a bitmap first; only once that bitmap exists is it encoded. Nothing is
shared between exports, so two exports started back to back simply run
twice on whatever snapshot each one was given.
"""

import io
import logging
from typing import Optional

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from . import config
from .assets import AssetResolver
from .document import build_document
from .formatters import export_filename
from .models import ExportArtifact, SheetState
from .rasterizer import CaptureError, ExportError, capture

logger = logging.getLogger(__name__)

EXPORT_KINDS = ('png', 'pdf')


class EncodeError(ExportError):
    """A captured bitmap could not be written as PNG or PDF"""


def _capture_sheet(state: SheetState, assets: Optional[AssetResolver], pixel_scale: float) -> Image.Image:
    emblem_available = assets is not None and assets.has('emblem')
    document = build_document(state, emblem_available=emblem_available)
    return capture(document, pixel_scale, assets)


def encode_png(bitmap: Image.Image) -> bytes:
    buffer = io.BytesIO()
    try:
        bitmap.save(buffer, format='PNG')
    except (OSError, ValueError) as e:
        raise EncodeError(f"Could not encode PNG: {e}") from e
    return buffer.getvalue()


def encode_pdf(bitmap: Image.Image, title: str = '') -> bytes:
    """
    Single A4 portrait page with the bitmap stretched over the whole page.

    The bitmap is embedded from its PNG encoding and drawn from (0, 0) to the
    page width and height; no margins are kept.
    """
    page_width, page_height = A4
    buffer = io.BytesIO()
    try:
        png = io.BytesIO(encode_png(bitmap))
        pdf = canvas.Canvas(buffer, pagesize=A4)
        if title:
            pdf.setTitle(title)
        pdf.drawImage(ImageReader(png), 0, 0, width=page_width, height=page_height, mask='auto')
        pdf.showPage()
        pdf.save()
    except EncodeError:
        raise
    except (OSError, ValueError) as e:
        raise EncodeError(f"Could not assemble PDF: {e}") from e
    return buffer.getvalue()


def export_png(state: SheetState, assets: Optional[AssetResolver] = None,
               pixel_scale: float = config.PNG_PIXEL_SCALE) -> ExportArtifact:
    """Capture the sheet and encode it as PNG"""
    bitmap = _capture_sheet(state, assets, pixel_scale)
    content = encode_png(bitmap)
    return ExportArtifact(
        filename=export_filename(state.metadata.opponent, state.metadata.date, 'png'),
        mimetype='image/png',
        content=content,
        width_px=bitmap.width,
        height_px=bitmap.height,
    )


def export_pdf(state: SheetState, assets: Optional[AssetResolver] = None,
               pixel_scale: float = config.PDF_PIXEL_SCALE) -> ExportArtifact:
    """Capture the sheet at print scale and place it on an A4 page"""
    bitmap = _capture_sheet(state, assets, pixel_scale)
    filename = export_filename(state.metadata.opponent, state.metadata.date, 'pdf')
    content = encode_pdf(bitmap, title=filename)
    return ExportArtifact(
        filename=filename,
        mimetype='application/pdf',
        content=content,
        width_px=bitmap.width,
        height_px=bitmap.height,
    )


def run_export(kind: str, state: SheetState, assets: Optional[AssetResolver] = None) -> Optional[ExportArtifact]:
    """
    Export boundary used by the web layer.

    Returns:
        The artifact, or None when capture or encoding failed. Failures are
        logged and never propagate.
    """
    if kind not in EXPORT_KINDS:
        raise ValueError(f"Export kind must be one of {', '.join(EXPORT_KINDS)}")

    try:
        if kind == 'png':
            artifact = export_png(state, assets)
        else:
            artifact = export_pdf(state, assets)
    except CaptureError:
        logger.exception("Error capturing sheet for %s export", kind.upper())
        return None
    except ExportError:
        logger.exception("Error generating %s", kind.upper())
        return None

    logger.info("Generated %s (%d bytes)", artifact.filename, len(artifact.content))
    return artifact
