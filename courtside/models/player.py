from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, List, Optional


class StatType(Enum):
    """Box-score counters that can be recorded for a player."""
    POINTS_1_MADE = "1PM"
    POINTS_1_ATTEMPTED = "1PA"
    POINTS_2_MADE = "2PM"
    POINTS_2_ATTEMPTED = "2PA"
    POINTS_3_MADE = "3PM"
    POINTS_3_ATTEMPTED = "3PA"
    REBOUNDS_OFFENSIVE = "ORB"
    REBOUNDS_DEFENSIVE = "DRB"
    ASSISTS = "AST"
    STEALS = "STL"
    BLOCKS = "BLK"
    TURNOVERS = "TOV"
    FOULS_PERSONAL = "PF"

    @property
    def field_name(self) -> str:
        return _STAT_FIELDS[self]

    @classmethod
    def parse(cls, value: str) -> 'StatType':
        """Accept either the box-score code ("2PM") or the member name."""
        try:
            return cls(value.upper())
        except ValueError:
            return cls[value.upper()]


_STAT_FIELDS = {
    StatType.POINTS_1_MADE: 'one_made',
    StatType.POINTS_1_ATTEMPTED: 'one_attempted',
    StatType.POINTS_2_MADE: 'two_made',
    StatType.POINTS_2_ATTEMPTED: 'two_attempted',
    StatType.POINTS_3_MADE: 'three_made',
    StatType.POINTS_3_ATTEMPTED: 'three_attempted',
    StatType.REBOUNDS_OFFENSIVE: 'offensive_rebounds',
    StatType.REBOUNDS_DEFENSIVE: 'defensive_rebounds',
    StatType.ASSISTS: 'assists',
    StatType.STEALS: 'steals',
    StatType.BLOCKS: 'blocks',
    StatType.TURNOVERS: 'turnovers',
    StatType.FOULS_PERSONAL: 'personal_fouls',
}


@dataclass
class Player:
    """A player from the global roster."""
    id: str
    name: str
    number: str = ""
    position: Optional[str] = None

    @property
    def label(self) -> str:
        return f"{self.name} (#{self.number})" if self.number else self.name

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'number': self.number,
            'position': self.position,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Player':
        return cls(
            id=str(data['id']),
            name=data['name'],
            number=str(data.get('number') or ''),
            position=data.get('position') or None,
        )


@dataclass
class Team:
    """A predefined team: a name plus the roster ids that belong to it."""
    id: str
    name: str
    player_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'playerIds': list(self.player_ids)}

    @classmethod
    def from_dict(cls, data: dict) -> 'Team':
        return cls(
            id=str(data['id']),
            name=data['name'],
            player_ids=[str(pid) for pid in data.get('playerIds', [])],
        )


@dataclass
class PlayerStats:
    """One player's counters for a single game."""
    one_made: int = 0
    one_attempted: int = 0
    two_made: int = 0
    two_attempted: int = 0
    three_made: int = 0
    three_attempted: int = 0
    offensive_rebounds: int = 0
    defensive_rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    turnovers: int = 0
    personal_fouls: int = 0

    def get(self, stat: StatType) -> int:
        return getattr(self, stat.field_name)

    def set(self, stat: StatType, value: int) -> None:
        setattr(self, stat.field_name, value)

    @property
    def points(self) -> int:
        return self.one_made + 2 * self.two_made + 3 * self.three_made

    @property
    def total_rebounds(self) -> int:
        return self.offensive_rebounds + self.defensive_rebounds

    def to_dict(self) -> Dict[str, int]:
        """Keyed by box-score code, the way snapshots are stored."""
        return {stat.value: self.get(stat) for stat in StatType}

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> 'PlayerStats':
        stats = cls()
        for stat in StatType:
            stats.set(stat, int(data.get(stat.value, 0) or 0))
        return stats

    def is_consistent(self) -> bool:
        """All counters non-negative and no shot category with more makes than attempts."""
        if any(getattr(self, f.name) < 0 for f in fields(self)):
            return False
        return (
            self.one_made <= self.one_attempted
            and self.two_made <= self.two_attempted
            and self.three_made <= self.three_attempted
        )
