"""
Sheet state: seed data, update operations and the session container.

Every operation takes a SheetState and returns a new one. Nothing is edited
in place, so any snapshot handed to the document builder or an export stays
valid while the user keeps typing.
"""

import re
import threading
from typing import Callable, Optional, Tuple, TypeVar, Union

from .models import (
    FieldRole, FormationType, MatchMetadata, NormalizedPosition, Player,
    SheetState, StaffMember, Substitute
)

T = TypeVar('T')

EDITABLE_PLAYER_FIELDS = ('name', 'number')
EDITABLE_METADATA_FIELDS = ('category', 'opponent', 'date', 'venue', 'kickoff')
FIRST_SUBSTITUTE_NUMBER = 12
NEW_SUBSTITUTE_NAME = 'Nuevo Jugador'


def _player(id: str, number: str, name: str, pos: FieldRole, x: float, y: float) -> Player:
    return Player(
        id=id,
        number=number,
        name=name,
        pos=pos,
        coords=NormalizedPosition(x_pct=x, y_pct_from_baseline=y),
    )


def default_state() -> SheetState:
    """Sheet the application starts with"""
    lineup = (
        _player('1', '01', 'Gonzalo González', FieldRole.GOALKEEPER, 50, 10),
        _player('2', '04', 'Manuel Vargas', FieldRole.DEFENDER, 85, 30),
        _player('3', '02', 'Santiago Barraza', FieldRole.DEFENDER, 65, 25),
        _player('4', '06', 'Nicolás Canavessio', FieldRole.DEFENDER, 35, 25),
        _player('5', '03', 'Raúl Chamorro', FieldRole.DEFENDER, 15, 30),
        _player('6', '08', 'Alexandro Ponce', FieldRole.MIDFIELDER, 85, 55),
        _player('7', '05', 'Manuel Vargas', FieldRole.MIDFIELDER, 65, 55),
        _player('8', '10', 'Joaquín Castellano', FieldRole.MIDFIELDER, 35, 55),
        _player('9', '11', 'Gonzalo Schonfeld', FieldRole.MIDFIELDER, 15, 55),
        _player('10', '07', 'Adrián Rodríguez', FieldRole.FORWARD, 35, 85),
        _player('11', '09', 'Pedro Muné', FieldRole.FORWARD, 65, 85),
    )
    substitutes = tuple(
        Substitute(number=number, name=name) for number, name in [
            ('12', 'A. Ruffinetti'),
            ('13', 'I. Baudin'),
            ('14', 'F. Hansen'),
            ('15', 'G. Pardo'),
            ('16', 'F. Cima'),
            ('17', 'C. Sánchez'),
            ('18', 'A. Maza'),
        ]
    )
    staff = (
        StaffMember(role='DT', name='Marcelo Milanese'),
        StaffMember(role='AC', name='Ezequiel Centurion'),
        StaffMember(role='PF', name='Emanuel Moyano'),
    )
    metadata = MatchMetadata(
        category='Primera Div.',
        opponent='Libertad de Sunchales',
        date='2023-10-12',
        venue='Estadio Principal',
    )
    return SheetState(
        formation=FormationType.F_4_4_2,
        lineup=lineup,
        substitutes=substitutes,
        staff=staff,
        metadata=metadata,
    )


def _check_index(items: Tuple, index: int, what: str) -> None:
    if index < 0 or index >= len(items):
        raise IndexError(f"{what} index {index} out of range (0-{len(items) - 1})")


def _replace_at(items: Tuple[T, ...], index: int, item: T) -> Tuple[T, ...]:
    return items[:index] + (item,) + items[index + 1:]


def _check_field(field: str, allowed: Tuple[str, ...]) -> None:
    if field not in allowed:
        raise ValueError(f"Field must be one of {', '.join(allowed)}")


def update_lineup(state: SheetState, index: int, field: str, value: str) -> SheetState:
    """Change the name or number of a starting player"""
    _check_index(state.lineup, index, 'Line-up')
    _check_field(field, EDITABLE_PLAYER_FIELDS)
    player = state.lineup[index].model_copy(update={field: value})
    return state.model_copy(update={'lineup': _replace_at(state.lineup, index, player)})


def next_substitute_number(substitutes: Tuple[Substitute, ...]) -> str:
    """
    Number for a new substitute: one more than the highest current number,
    or 12 for an empty bench. Numbers without leading digits are ignored.
    """
    numbers = []
    for sub in substitutes:
        match = re.match(r'\s*(\d+)', sub.number)
        if match:
            numbers.append(int(match.group(1)))
    if not numbers:
        return str(FIRST_SUBSTITUTE_NUMBER)
    return str(max(numbers) + 1)


def add_substitute(state: SheetState, name: str = NEW_SUBSTITUTE_NAME) -> SheetState:
    substitute = Substitute(number=next_substitute_number(state.substitutes), name=name)
    return state.model_copy(update={'substitutes': state.substitutes + (substitute,)})


def remove_substitute(state: SheetState, index: int) -> SheetState:
    _check_index(state.substitutes, index, 'Substitute')
    remaining = state.substitutes[:index] + state.substitutes[index + 1:]
    return state.model_copy(update={'substitutes': remaining})


def update_substitute(state: SheetState, index: int, field: str, value: str) -> SheetState:
    _check_index(state.substitutes, index, 'Substitute')
    _check_field(field, EDITABLE_PLAYER_FIELDS)
    substitute = state.substitutes[index].model_copy(update={field: value})
    return state.model_copy(update={'substitutes': _replace_at(state.substitutes, index, substitute)})


def update_staff(state: SheetState, index: int, name: str) -> SheetState:
    """Rename a staff member. Roles and head count are fixed."""
    _check_index(state.staff, index, 'Staff')
    member = state.staff[index].model_copy(update={'name': name})
    return state.model_copy(update={'staff': _replace_at(state.staff, index, member)})


def select_formation(state: SheetState, formation: Union[FormationType, str]) -> SheetState:
    return state.model_copy(update={'formation': FormationType(formation)})


def update_metadata(state: SheetState, **fields: str) -> SheetState:
    for field in fields:
        _check_field(field, EDITABLE_METADATA_FIELDS)
    metadata = state.metadata.model_copy(update=fields)
    return state.model_copy(update={'metadata': metadata})


def set_notes(state: SheetState, notes: str) -> SheetState:
    return state.model_copy(update={'notes': notes})


class SheetStore:
    """Holds the current sheet for the application session"""

    def __init__(self, initial: Optional[SheetState] = None):
        self._state = initial if initial is not None else default_state()
        self._lock = threading.Lock()

    def get(self) -> SheetState:
        return self._state

    def apply(self, operation: Callable[..., SheetState], *args, **kwargs) -> SheetState:
        """Run an update operation against the current snapshot and keep the result"""
        with self._lock:
            self._state = operation(self._state, *args, **kwargs)
            return self._state

    def reset(self) -> SheetState:
        with self._lock:
            self._state = default_state()
            return self._state
