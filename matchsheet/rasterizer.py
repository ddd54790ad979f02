"""
Rasterizer: paints a Document onto a Pillow bitmap.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from PIL import Image, ImageDraw, ImageFont

from .assets import AssetError, AssetResolver
from .document import Box, Document, Ellipse, Line, Node, Picture, Polygon, Rect, Text

logger = logging.getLogger(__name__)

ELLIPSIS = '…'

_FONT_FILES = {
    # (bold, italic, mono)
    (False, False, False): 'DejaVuSans.ttf',
    (True, False, False): 'DejaVuSans-Bold.ttf',
    (False, True, False): 'DejaVuSans-Oblique.ttf',
    (True, True, False): 'DejaVuSans-BoldOblique.ttf',
    (False, False, True): 'DejaVuSansMono.ttf',
    (True, False, True): 'DejaVuSansMono-Bold.ttf',
    (False, True, True): 'DejaVuSansMono-Oblique.ttf',
    (True, True, True): 'DejaVuSansMono-BoldOblique.ttf',
}


class ExportError(Exception):
    """Base class for failures while producing an export"""


class CaptureError(ExportError):
    """The document could not be rasterized"""


@lru_cache(maxsize=128)
def load_font(size: int, bold: bool = False, italic: bool = False, mono: bool = False):
    """TrueType font at a pixel size, falling back to Pillow's bundled font"""
    try:
        return ImageFont.truetype(_FONT_FILES[(bold, italic, mono)], size)
    except OSError:
        return ImageFont.load_default(size=size)


class _Painter:
    def __init__(self, image: Image.Image, scale: float, assets: Optional[AssetResolver]):
        self.image = image
        self.scale = scale
        self.assets = assets
        self.draw = ImageDraw.Draw(image, 'RGBA')

    def _xy(self, x: float, y: float):
        return x * self.scale, y * self.scale

    def _box(self, box: Box):
        return [box.x * self.scale, box.y * self.scale, box.right * self.scale, box.bottom * self.scale]

    def _width(self, width: float) -> int:
        return max(1, round(width * self.scale)) if width else 0

    def paint(self, node: Node) -> None:
        if isinstance(node, Rect):
            self._rect(node)
        elif isinstance(node, Line):
            self.draw.line([self._xy(*p) for p in node.points], fill=node.color,
                           width=self._width(node.width), joint='curve')
        elif isinstance(node, Ellipse):
            self.draw.ellipse(self._box(node.box), fill=node.fill, outline=node.outline,
                              width=self._width(node.width))
        elif isinstance(node, Polygon):
            self.draw.polygon([self._xy(*p) for p in node.points], fill=node.fill,
                              outline=node.outline, width=self._width(node.width))
        elif isinstance(node, Text):
            self._text(node)
        elif isinstance(node, Picture):
            self._picture(node)
        else:
            raise CaptureError(f"Unsupported node type: {type(node).__name__}")

    def _rect(self, node: Rect) -> None:
        xy = self._box(node.box)
        width = self._width(node.width) if node.outline else 0
        if node.radius:
            self.draw.rounded_rectangle(xy, radius=node.radius * self.scale, fill=node.fill,
                                        outline=node.outline, width=width)
        else:
            self.draw.rectangle(xy, fill=node.fill, outline=node.outline, width=width)

    def _fit(self, text: str, font, max_px: float) -> str:
        if font.getlength(text) <= max_px:
            return text
        while text and font.getlength(text + ELLIPSIS) > max_px:
            text = text[:-1]
        return text.rstrip() + ELLIPSIS

    def _wrap(self, text: str, font, max_px: float) -> List[str]:
        lines = []
        for paragraph in text.split('\n'):
            current = ''
            for word in paragraph.split(' '):
                candidate = f"{current} {word}" if current else word
                if current and font.getlength(candidate) > max_px:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines

    def _text(self, node: Text) -> None:
        font = load_font(max(1, round(node.size * self.scale)), node.bold, node.italic, node.mono)
        x, y = self._xy(node.x, node.y)

        if node.wrap and node.max_width:
            max_px = node.max_width * self.scale
            lines = self._wrap(node.text, font, max_px)
            if node.max_lines and len(lines) > node.max_lines:
                lines = lines[:node.max_lines]
                lines[-1] = self._fit(lines[-1] + ELLIPSIS, font, max_px)
            step = (node.line_height or node.size * 1.4) * self.scale
            for i, line in enumerate(lines):
                self.draw.text((x, y + i * step), self._fit(line, font, max_px), font=font,
                               fill=node.color, anchor=node.anchor)
            return

        text = node.text
        if node.max_width:
            text = self._fit(text, font, node.max_width * self.scale)
        if node.box_fill and text:
            left, top, right, bottom = self.draw.textbbox((x, y), text, font=font, anchor=node.anchor)
            pad_x, pad_y = node.box_padding
            self.draw.rounded_rectangle(
                [left - pad_x * self.scale, top - pad_y * self.scale,
                 right + pad_x * self.scale, bottom + pad_y * self.scale],
                radius=node.box_radius * self.scale, fill=node.box_fill
            )
        self.draw.text((x, y), text, font=font, fill=node.color, anchor=node.anchor)

    def _picture(self, node: Picture) -> None:
        if self.assets is None:
            raise AssetError(f"No asset resolver available for {node.source}")
        picture = self.assets.load(node.source)
        left, top, right, bottom = self._box(node.box)
        box_w, box_h = int(right - left), int(bottom - top)
        # Contain: keep aspect ratio and centre inside the box
        picture.thumbnail((box_w, box_h), Image.LANCZOS)
        if picture.width < box_w and picture.height < box_h:
            ratio = min(box_w / picture.width, box_h / picture.height)
            picture = picture.resize((max(1, int(picture.width * ratio)),
                                      max(1, int(picture.height * ratio))), Image.LANCZOS)
        dest = (int(left + (box_w - picture.width) / 2), int(top + (box_h - picture.height) / 2))
        self.image.alpha_composite(picture, dest=dest)


def capture(document: Document, pixel_scale: float, assets: Optional[AssetResolver] = None) -> Image.Image:
    """
    Rasterize a document.

    Args:
        document: Laid-out team sheet
        pixel_scale: Magnification over the page size (2 for screen, 3 for print)
        assets: Resolver for the document's pictures

    Returns:
        RGBA bitmap of exactly the page, on an opaque white background

    Raises:
        CaptureError: If a picture cannot be loaded or painting fails
    """
    if pixel_scale <= 0:
        raise CaptureError(f"Pixel scale must be positive, got {pixel_scale}")

    size = (round(document.width * pixel_scale), round(document.height * pixel_scale))
    logger.debug("Capturing document at scale %s (%dx%d)", pixel_scale, *size)
    image = Image.new('RGBA', size, document.background)
    painter = _Painter(image, pixel_scale, assets)
    try:
        for node in document.nodes:
            painter.paint(node)
    except (AssetError, OSError, ValueError) as e:
        raise CaptureError(f"Could not rasterize document: {e}") from e
    return image
