"""
Layout resolver: places the starting line-up on the pitch.
"""

import logging
from typing import List, Sequence

from .formations import get_formation
from .models import NormalizedPosition, Player, PositionedPlayer, SheetState

logger = logging.getLogger(__name__)


def resolve_positions(roster: Sequence[Player],
                      formation_coords: Sequence[NormalizedPosition]) -> List[PositionedPlayer]:
    """
    Bind formation positions to players by index.

    Player ``i`` gets ``formation_coords[i]``. A player without a matching
    position keeps its own default coordinate, so a formation change never
    leaves anyone off the pitch.

    Args:
        roster: Starting players in line-up order
        formation_coords: Ordered positions of the selected formation

    Returns:
        One PositionedPlayer per roster entry, same order
    """
    if len(roster) != len(formation_coords):
        logger.warning(
            "Line-up has %d players but formation defines %d positions",
            len(roster), len(formation_coords)
        )

    positioned = []
    for i, player in enumerate(roster):
        coords = formation_coords[i] if i < len(formation_coords) else player.coords
        positioned.append(PositionedPlayer.from_player(player, coords))
    return positioned


def positioned_lineup(state: SheetState) -> List[PositionedPlayer]:
    """Resolve the line-up of a sheet against its selected formation"""
    return resolve_positions(state.lineup, get_formation(state.formation))
