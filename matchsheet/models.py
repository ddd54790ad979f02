from typing import Tuple
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldRole(str, Enum):
    GOALKEEPER = "ARQ"
    DEFENDER = "DEF"
    MIDFIELDER = "MED"
    FORWARD = "DEL"


class FormationType(str, Enum):
    F_4_4_2 = "4-4-2"
    F_4_3_3 = "4-3-3"
    F_3_5_2 = "3-5-2"
    F_4_1_4_1 = "4-1-4-1"


class NormalizedPosition(BaseModel):
    """Point on the pitch in percent of its width and height.

    ``x_pct`` grows from the left touchline to the right one.
    ``y_pct_from_baseline`` grows from our own goal line (bottom of the
    drawn pitch) towards the opponent's goal line (top).
    """
    model_config = ConfigDict(frozen=True)

    x_pct: float
    y_pct_from_baseline: float

    @field_validator('x_pct', 'y_pct_from_baseline')
    @classmethod
    def validate_percent(cls, v):
        if v < 0 or v > 100:
            raise ValueError('Coordinate must be between 0 and 100')
        return v


class Player(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    number: str  # Kept as text: "01" must not become 1
    name: str
    pos: FieldRole
    coords: NormalizedPosition  # Default position, only used as fallback


class PositionedPlayer(Player):
    """A starting player with ``coords`` resolved for the current formation."""

    @classmethod
    def from_player(cls, player: Player, coords: NormalizedPosition) -> "PositionedPlayer":
        return cls(
            id=player.id,
            number=player.number,
            name=player.name,
            pos=player.pos,
            coords=coords,
        )


class Substitute(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: str
    name: str


class StaffMember(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str  # DT / AC / PF
    name: str


class MatchMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str = ""
    opponent: str = ""
    date: str = ""  # ISO format: "2024-05-01"
    venue: str = ""
    kickoff: str = "15:30 HS"


class SheetState(BaseModel):
    """Immutable snapshot of everything the team sheet is built from."""
    model_config = ConfigDict(frozen=True)

    formation: FormationType = FormationType.F_4_4_2
    lineup: Tuple[Player, ...] = ()
    substitutes: Tuple[Substitute, ...] = ()
    staff: Tuple[StaffMember, ...] = ()
    metadata: MatchMetadata = Field(default_factory=MatchMetadata)
    notes: str = ""


class ExportArtifact(BaseModel):
    """Encoded export file held in memory until it is downloaded"""
    filename: str
    mimetype: str
    content: bytes
    width_px: int
    height_px: int
