"""
Document model for the team sheet.

``build_document`` turns a SheetState into a fully laid-out page: a flat list
of drawing nodes in paint order, positioned in CSS pixels on a 794 x 1123
page (A4 portrait at 96 dpi). The rasterizer only scales and paints; every
layout decision is taken here.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from . import config
from .formatters import format_match_date, surname
from .layout import positioned_lineup
from .models import NormalizedPosition, PositionedPlayer, SheetState, StaffMember, Substitute

PAGE_WIDTH = 794
PAGE_HEIGHT = 1123
PAGE_PADDING = 40
TOP_BORDER = 12
CONTENT_LEFT = PAGE_PADDING
CONTENT_WIDTH = PAGE_WIDTH - 2 * PAGE_PADDING
CONTENT_RIGHT = CONTENT_LEFT + CONTENT_WIDTH

NOTES_TOP = PAGE_HEIGHT - PAGE_PADDING - 92
NOTES_PLACEHOLDER = 'Escribe tus notas en el panel lateral...'

WHITE = '#FFFFFF'
TEXT_DARK = '#111827'
TEXT_BODY = '#1F2937'
TEXT_MUTED = '#4B5563'
TEXT_LIGHT = '#9CA3AF'
TEXT_FAINT = '#D1D5DB'
RULE = '#E5E7EB'
RULE_LIGHT = '#F3F4F6'
PITCH_GREEN = '#2D7A3E'
PITCH_BORDER = '#3D8A4E'
PITCH_LINE = '#FFFFFF4D'
STAFF_BADGE = '#059669'

Point = Tuple[float, float]


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def inset(self, amount: float) -> "Box":
        return Box(self.x + amount, self.y + amount, self.w - 2 * amount, self.h - 2 * amount)


@dataclass(frozen=True)
class Rect:
    box: Box
    fill: Optional[str] = None
    outline: Optional[str] = None
    width: float = 0
    radius: float = 0
    role: str = ''
    key: Optional[str] = None


@dataclass(frozen=True)
class Line:
    points: Tuple[Point, ...]
    color: str
    width: float = 1
    role: str = ''
    key: Optional[str] = None


@dataclass(frozen=True)
class Ellipse:
    box: Box
    outline: Optional[str] = None
    width: float = 0
    fill: Optional[str] = None
    role: str = ''
    key: Optional[str] = None


@dataclass(frozen=True)
class Polygon:
    points: Tuple[Point, ...]
    fill: Optional[str] = None
    outline: Optional[str] = None
    width: float = 0
    role: str = ''
    key: Optional[str] = None


@dataclass(frozen=True)
class Text:
    """
    A run of text anchored at (x, y).

    ``anchor`` uses Pillow's two-letter anchors ("la" = left/ascender,
    "mm" = middle/middle, "ra" = right/ascender). ``max_width`` truncates
    with an ellipsis, or wraps when ``wrap`` is set. ``box_fill`` paints a
    pill behind the measured text.
    """
    x: float
    y: float
    text: str
    size: float
    color: str = TEXT_BODY
    bold: bool = False
    italic: bool = False
    mono: bool = False
    anchor: str = 'la'
    max_width: Optional[float] = None
    wrap: bool = False
    line_height: Optional[float] = None
    max_lines: Optional[int] = None
    box_fill: Optional[str] = None
    box_padding: Tuple[float, float] = (0, 0)
    box_radius: float = 0
    role: str = ''
    key: Optional[str] = None


@dataclass(frozen=True)
class Picture:
    box: Box
    source: str
    role: str = ''
    key: Optional[str] = None


Node = Union[Rect, Line, Ellipse, Polygon, Text, Picture]


@dataclass
class Document:
    width: int
    height: int
    background: str = WHITE
    nodes: List[Node] = field(default_factory=list)

    def find(self, role: str, key: Optional[str] = None) -> List[Node]:
        """Nodes with the given role (and key), in paint order"""
        return [n for n in self.nodes if n.role == role and (key is None or n.key == key)]

    def index_of(self, node: Node) -> int:
        return next(i for i, n in enumerate(self.nodes) if n is node)

    def picture_sources(self) -> List[str]:
        return [n.source for n in self.nodes if isinstance(n, Picture)]


def pitch_point(field_box: Box, position: NormalizedPosition) -> Point:
    """Page coordinates of a pitch position. Vertical percent counts up from the bottom."""
    x = field_box.x + field_box.w * position.x_pct / 100
    y = field_box.bottom - field_box.h * position.y_pct_from_baseline / 100
    return x, y


# Jersey outline in a 100 x 100 view box
_JERSEY_BODY = ((20, 20), (80, 20), (85, 45), (70, 45), (70, 90), (30, 90), (30, 45), (15, 45))
_JERSEY_NECK = ((40, 20), (45, 24.5), (50, 25), (55, 24.5), (60, 20))


def _jersey(box: Box, number: str, number_size: float, role: str, key: Optional[str]) -> List[Node]:
    scale = box.w / 100

    def at(px: float, py: float) -> Point:
        return box.x + px * scale, box.y + py * scale

    stroke = max(1.0, 2 * scale)
    return [
        Polygon(tuple(at(*p) for p in _JERSEY_BODY), fill=config.PRIMARY_COLOR,
                outline=WHITE, width=stroke, role=role, key=key),
        Rect(Box(*at(45, 20), 10 * scale, 70 * scale), fill='#FFFFFF33', role=role, key=key),
        Line(tuple(at(*p) for p in _JERSEY_NECK), color=WHITE, width=stroke, role=role, key=key),
        Text(box.x + box.w / 2, box.y + box.h / 2 + box.h / 12, number, number_size,
             color=WHITE, bold=True, anchor='mm', role=role, key=key),
    ]


def _section_heading(x: float, y: float, title: str, width: float, role: str) -> List[Node]:
    return [
        Rect(Box(x, y + 1, 12, 12), fill=config.PRIMARY_COLOR, radius=2, role=role),
        Text(x + 20, y, title.upper(), 11, color=TEXT_DARK, bold=True, role=role),
        Line(((x, y + 22), (x + width, y + 22)), color=RULE, role=role),
    ]


def _header(emblem_available: bool) -> Tuple[List[Node], float]:
    y = PAGE_PADDING + TOP_BORDER
    emblem_box = Box(CONTENT_LEFT, y, 96, 96)
    nodes: List[Node] = [
        Rect(emblem_box, fill=WHITE, outline=RULE_LIGHT, width=1, radius=8, role='header'),
    ]
    if emblem_available:
        nodes.append(Picture(emblem_box.inset(4), source='emblem', role='emblem'))

    badge = Box(CONTENT_RIGHT - 214, y + 26, 214, 44)
    title_x = emblem_box.right + 24
    nodes.extend([
        Text(title_x, y + 14, config.CLUB_NAME.upper(), 28, color=config.PRIMARY_COLOR,
             bold=True, max_width=badge.x - title_x - 16, role='header'),
        Text(title_x, y + 56, config.CLUB_LOCATION.upper(), 16, color=TEXT_LIGHT,
             max_width=badge.x - title_x - 16, role='header'),
        Rect(badge, outline=config.PRIMARY_COLOR + '1A', width=2, radius=8, role='header'),
        Text(badge.x + badge.w / 2, badge.y + badge.h / 2, 'PLANILLA DE CITACIÓN', 13,
             color=config.PRIMARY_COLOR, bold=True, anchor='mm', role='header'),
    ])
    divider_y = emblem_box.bottom + 32
    nodes.append(Line(((CONTENT_LEFT, divider_y), (CONTENT_RIGHT, divider_y)),
                      color=RULE_LIGHT, role='header'))
    return nodes, divider_y + 24


def _info_strip(state: SheetState, y: float) -> Tuple[List[Node], float]:
    meta = state.metadata
    cells = [
        ('Categoría', meta.category),
        ('Rival', meta.opponent),
        ('Fecha', format_match_date(meta.date)),
        ('Hora', meta.kickoff),
        ('Cancha', meta.venue),
    ]
    height = 64
    cell_w = (CONTENT_WIDTH - (len(cells) - 1)) / len(cells)
    nodes: List[Node] = [Rect(Box(CONTENT_LEFT, y, CONTENT_WIDTH, height), fill=RULE_LIGHT,
                              radius=8, role='info')]
    for i, (label, value) in enumerate(cells):
        x = CONTENT_LEFT + i * (cell_w + 1)
        nodes.extend([
            Rect(Box(x, y + 1, cell_w, height - 2), fill=WHITE, role='info'),
            Text(x + 16, y + 14, label.upper(), 9, color=TEXT_LIGHT, bold=True, role='info'),
            Text(x + 16, y + 32, value, 14, color=TEXT_DARK, bold=True,
                 max_width=cell_w - 32, role='info', key=label),
        ])
    return nodes, y + height + 24


def _lineup_table(players: Sequence[PositionedPlayer], x: float, y: float, width: float) -> Tuple[List[Node], float]:
    nodes = _section_heading(x, y, 'Formación Inicial', width, 'lineup')
    y += 30
    nodes.extend([
        Text(x, y, 'NO.', 8, color=TEXT_LIGHT, bold=True, role='lineup'),
        Text(x + 36, y, 'JUGADOR', 8, color=TEXT_LIGHT, bold=True, role='lineup'),
        Text(x + width, y, 'POS', 8, color=TEXT_LIGHT, bold=True, anchor='ra', role='lineup'),
    ])
    y += 18
    for player in players:
        nodes.extend([
            Text(x, y, player.number, 10, color=TEXT_LIGHT, bold=True, mono=True,
                 role='lineup', key=player.id),
            Text(x + 36, y, player.name, 10, color=TEXT_BODY, bold=True,
                 max_width=width - 72, role='lineup', key=player.id),
            Text(x + width, y + 2, player.pos.value, 8, color=TEXT_LIGHT, bold=True, mono=True,
                 anchor='ra', role='lineup', key=player.id),
            Line(((x, y + 15), (x + width, y + 15)), color=RULE_LIGHT, role='lineup'),
        ])
        y += 18
    return nodes, y + 24


def _substitute_list(substitutes: Sequence[Substitute], x: float, y: float, width: float) -> Tuple[List[Node], float]:
    nodes = _section_heading(x, y, 'Suplentes', width, 'substitutes')
    y += 30
    col_w = (width - 16) / 2
    for i, sub in enumerate(substitutes):
        cx = x + (i % 2) * (col_w + 16)
        cy = y + (i // 2) * 18
        nodes.extend([
            Text(cx, cy, sub.number, 10, color=TEXT_FAINT, bold=True, mono=True, role='substitutes'),
            Text(cx + 24, cy, sub.name, 10, color=TEXT_MUTED, max_width=col_w - 24,
                 role='substitutes'),
            Line(((cx, cy + 15), (cx + col_w, cy + 15)), color=RULE_LIGHT, role='substitutes'),
        ])
    rows = (len(substitutes) + 1) // 2
    return nodes, y + rows * 18 + 24


def _staff_list(staff: Sequence[StaffMember], x: float, y: float, width: float) -> Tuple[List[Node], float]:
    nodes = _section_heading(x, y, 'Cuerpo Técnico', width, 'staff')
    y += 30
    for member in staff:
        badge = Box(x, y, 24, 13)
        nodes.extend([
            Rect(badge, fill=STAFF_BADGE, radius=3, role='staff'),
            Text(badge.x + badge.w / 2, badge.y + badge.h / 2, member.role.upper(), 7,
                 color=WHITE, bold=True, anchor='mm', role='staff'),
            Text(x + 34, y, member.name, 10, color=TEXT_BODY, bold=True,
                 max_width=width - 34, role='staff'),
            Line(((x, y + 16), (x + width, y + 16)), color=RULE_LIGHT, role='staff'),
        ])
        y += 20
    return nodes, y


def _pitch(players: Sequence[PositionedPlayer], box: Box) -> List[Node]:
    nodes: List[Node] = [
        Rect(box, fill=PITCH_GREEN, outline=PITCH_BORDER, width=4, radius=12, role='pitch'),
    ]

    # Markings first so every marker paints over them
    marks = box.inset(20)
    mid_y = marks.y + marks.h / 2
    circle = 128
    area_w = marks.w / 2
    area_h = 96
    area_x = marks.x + (marks.w - area_w) / 2
    nodes.extend([
        Rect(marks, outline=PITCH_LINE, width=2, role='pitch-marking'),
        Line(((marks.x, mid_y), (marks.right, mid_y)), color=PITCH_LINE, width=2, role='pitch-marking'),
        Ellipse(Box(marks.x + marks.w / 2 - circle / 2, mid_y - circle / 2, circle, circle),
                outline=PITCH_LINE, width=2, role='pitch-marking'),
        Rect(Box(area_x, marks.y, area_w, area_h), outline=PITCH_LINE, width=2, role='pitch-marking'),
        Rect(Box(area_x, marks.bottom - area_h, area_w, area_h), outline=PITCH_LINE, width=2,
             role='pitch-marking'),
    ])

    # Players are positioned inside the pitch border
    field_box = box.inset(4)
    jersey_size = 48
    tag_h = 14
    group_h = jersey_size + tag_h - 4
    for player in players:
        cx, cy = pitch_point(field_box, player.coords)
        top = cy - group_h / 2
        nodes.extend(_jersey(Box(cx - jersey_size / 2, top, jersey_size, jersey_size),
                             player.number, 14, 'player-marker', player.id))
        nodes.append(Text(cx, top + jersey_size - 4 + tag_h / 2, surname(player.name).upper(), 9,
                          color=TEXT_DARK, bold=True, anchor='mm', box_fill='#FFFFFFE6',
                          box_padding=(8, 2), box_radius=3, role='name-tag', key=player.id))
    return nodes


BENCH_COLUMNS = 4
BENCH_ROW_STEP = 48
BENCH_TITLE_H = 36
BENCH_FOOT_H = 10


def _bench(substitutes: Sequence[Substitute], x: float, y: float, width: float,
           max_height: float) -> List[Node]:
    """
    Bench strip: a grid of four columns that grows one row per four
    substitutes. When the rows do not fit above the notes panel the whole
    grid is scaled down so the strip never exceeds ``max_height``.
    """
    rows = max(1, math.ceil(len(substitutes) / BENCH_COLUMNS))
    natural_h = BENCH_TITLE_H + rows * BENCH_ROW_STEP + BENCH_FOOT_H
    scale = 1.0
    if natural_h > max_height:
        scale = (max_height - BENCH_TITLE_H - BENCH_FOOT_H) / (rows * BENCH_ROW_STEP)
    box = Box(x, y, width, BENCH_TITLE_H + rows * BENCH_ROW_STEP * scale + BENCH_FOOT_H)

    nodes: List[Node] = [
        Rect(box, fill='#F9FAFB', outline=RULE_LIGHT, width=1, radius=12, role='bench'),
        Rect(Box(box.x + 12, box.y + 13, 10, 10), fill=config.PRIMARY_COLOR, radius=2, role='bench'),
        Text(box.x + 30, box.y + 12, 'SUPLENTES (BANCO)', 9, color=TEXT_DARK, bold=True, role='bench'),
    ]
    gap = 12
    col_w = (box.w - 24 - gap * (BENCH_COLUMNS - 1)) / BENCH_COLUMNS
    jersey_size = 28 * scale
    for i, sub in enumerate(substitutes):
        cx = box.x + 12 + (i % BENCH_COLUMNS) * (col_w + gap) + col_w / 2
        top = box.y + BENCH_TITLE_H + (i // BENCH_COLUMNS) * BENCH_ROW_STEP * scale
        nodes.extend(_jersey(Box(cx - jersey_size / 2, top, jersey_size, jersey_size),
                             sub.number, 9 * scale, 'bench', sub.number))
        nodes.append(Text(cx, top + jersey_size + 4 * scale, surname(sub.name).upper(), 7 * scale,
                          color=TEXT_LIGHT, bold=True, anchor='ma', max_width=col_w,
                          role='bench', key=sub.number))
    return nodes


def _notes(notes: str) -> List[Node]:
    top = NOTES_TOP
    text = notes if notes else NOTES_PLACEHOLDER
    return [
        Line(((CONTENT_LEFT, top), (CONTENT_RIGHT, top)), color=RULE_LIGHT, role='notes'),
        Text(CONTENT_LEFT, top + 16, 'NOTAS TÁCTICAS', 9, color=TEXT_FAINT, bold=True, role='notes'),
        Text(CONTENT_LEFT, top + 36, text, 10, color=TEXT_MUTED, italic=True,
             max_width=CONTENT_WIDTH, wrap=True, line_height=15, max_lines=4,
             role='notes', key='body'),
    ]


def build_document(state: SheetState, emblem_available: bool = True) -> Document:
    """
    Lay out the team sheet for a state snapshot.

    Args:
        state: Sheet snapshot
        emblem_available: Whether the header shows the club emblem picture

    Returns:
        Document with nodes in paint order
    """
    players = positioned_lineup(state)
    doc = Document(width=PAGE_WIDTH, height=PAGE_HEIGHT)
    doc.nodes.append(Rect(Box(0, 0, PAGE_WIDTH, TOP_BORDER), fill=config.PRIMARY_COLOR, role='page'))

    header, y = _header(emblem_available)
    doc.nodes.extend(header)
    info, y = _info_strip(state, y)
    doc.nodes.extend(info)

    # Two columns: lists on the left (5/12), pitch and bench on the right (7/12)
    gap = 24
    left_w = (CONTENT_WIDTH - gap) * 5 / 12
    right_x = CONTENT_LEFT + left_w + gap
    right_w = CONTENT_RIGHT - right_x

    lineup, left_y = _lineup_table(players, CONTENT_LEFT, y, left_w)
    doc.nodes.extend(lineup)
    subs, left_y = _substitute_list(state.substitutes, CONTENT_LEFT, left_y, left_w)
    doc.nodes.extend(subs)
    staff, left_y = _staff_list(state.staff, CONTENT_LEFT, left_y, left_w)
    doc.nodes.extend(staff)

    pitch_box = Box(right_x, y, right_w, right_w * 4 / 3)
    doc.nodes.extend(_pitch(players, pitch_box))
    bench_y = pitch_box.bottom + 12
    doc.nodes.extend(_bench(state.substitutes, right_x, bench_y, right_w, NOTES_TOP - 8 - bench_y))

    doc.nodes.extend(_notes(state.notes))
    return doc
