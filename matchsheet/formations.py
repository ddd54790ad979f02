"""
Formation catalog.

Each formation is an ordered list of 11 pitch positions. Position ``i`` is
taken by the ``i``-th player of the line-up, so the order of every table is
goalkeeper, back line, midfield, attack.
"""

from typing import Dict, Iterable, List, Tuple, Union

from .models import FormationType, NormalizedPosition


def _positions(*pairs: Tuple[float, float]) -> Tuple[NormalizedPosition, ...]:
    return tuple(NormalizedPosition(x_pct=x, y_pct_from_baseline=y) for x, y in pairs)


_FORMATIONS: Dict[FormationType, Tuple[NormalizedPosition, ...]] = {
    FormationType.F_4_4_2: _positions(
        (50, 10),                                   # GK
        (15, 30), (35, 25), (65, 25), (85, 30),     # DEF
        (15, 55), (35, 55), (65, 55), (85, 55),     # MED
        (35, 85), (65, 85),                         # DEL
    ),
    FormationType.F_4_3_3: _positions(
        (50, 10),
        (15, 30), (35, 25), (65, 25), (85, 30),
        (25, 50), (50, 55), (75, 50),
        (20, 80), (50, 85), (80, 80),
    ),
    FormationType.F_3_5_2: _positions(
        (50, 10),
        (25, 25), (50, 25), (75, 25),
        (10, 55), (30, 50), (50, 60), (70, 50), (90, 55),
        (35, 85), (65, 85),
    ),
    FormationType.F_4_1_4_1: _positions(
        (50, 10),
        (15, 30), (35, 25), (65, 25), (85, 30),
        (50, 45),                                   # CDM
        (15, 65), (35, 65), (65, 65), (85, 65),
        (50, 85),                                   # ST
    ),
}

# Display order for formation pickers
FORMATION_CHOICES: List[FormationType] = [
    FormationType.F_4_4_2,
    FormationType.F_4_3_3,
    FormationType.F_3_5_2,
    FormationType.F_4_1_4_1,
]


def get_formation(formation: Union[FormationType, str]) -> Tuple[NormalizedPosition, ...]:
    """Return the ordered positions for a formation identifier."""
    return _FORMATIONS[FormationType(formation)]


def iter_formations() -> Iterable[Tuple[FormationType, Tuple[NormalizedPosition, ...]]]:
    """Yield every formation with its positions, in display order."""
    for formation in FORMATION_CHOICES:
        yield formation, _FORMATIONS[formation]
