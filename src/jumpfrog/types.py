"""Type definitions for JumpFrog."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Tuple, Union


class Player(Enum):
    """Player identifiers."""
    GREEN = "GREEN"  # Starts on rows 6-7, moves upward (decreasing row)
    BLACK = "BLACK"  # Starts on rows 0-1, moves downward (increasing row)

    def opponent(self) -> "Player":
        """Return the opposing player."""
        return Player.BLACK if self == Player.GREEN else Player.GREEN


class Coord(NamedTuple):
    """A board square, 0-indexed. Row 0 is the top of the board."""
    r: int
    c: int

    def to_dict(self) -> dict:
        return {"r": self.r, "c": self.c}

    @classmethod
    def from_dict(cls, data) -> "Coord":
        """Accept either {"r": .., "c": ..} or a two-item sequence."""
        if isinstance(data, dict):
            return cls(int(data["r"]), int(data["c"]))
        r, c = data
        return cls(int(r), int(c))


@dataclass(frozen=True)
class Piece:
    """A frog on the board. The id is stable for the whole game."""
    id: str
    owner: Player

    def to_dict(self) -> dict:
        return {"id": self.id, "owner": self.owner.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Piece":
        return cls(id=str(data["id"]), owner=Player(data["owner"]))


@dataclass(frozen=True)
class Step:
    """
    A single-square move to an empty square.

    Usually diagonal; straight into an edge row or lateral along an edge row
    for the edge-row special cases.
    """
    from_: Coord
    to: Coord

    @property
    def start(self) -> Coord:
        return self.from_

    @property
    def end(self) -> Coord:
        return self.to

    @property
    def is_jump(self) -> bool:
        return False

    @property
    def path(self) -> Tuple[Coord, ...]:
        return (self.from_, self.to)

    def to_dict(self) -> dict:
        return {"type": "STEP", "from": self.from_.to_dict(), "to": self.to.to_dict()}

    def __repr__(self) -> str:
        return f"Step(({self.from_.r},{self.from_.c})->({self.to.r},{self.to.c}))"


@dataclass(frozen=True)
class Jump:
    """
    A single hop over one occupied square.

    Attributes:
        path: Positions from start to landing. Generated jumps always have
              len(path) == 2; chains are played as consecutive Jump moves.
    """
    path: Tuple[Coord, ...]

    @property
    def start(self) -> Coord:
        return self.path[0]

    @property
    def end(self) -> Coord:
        return self.path[-1]

    @property
    def is_jump(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {"type": "JUMP", "path": [p.to_dict() for p in self.path]}

    def __repr__(self) -> str:
        path_str = "->".join(f"({p.r},{p.c})" for p in self.path)
        return f"Jump({path_str})"


Move = Union[Step, Jump]


def move_from_dict(data: dict) -> Move:
    """
    Create a Move from its wire representation.

    Raises:
        ValueError: If the payload is not a well-formed STEP or JUMP.
    """
    try:
        kind = data["type"]
        if kind == "STEP":
            return Step(Coord.from_dict(data["from"]), Coord.from_dict(data["to"]))
        if kind == "JUMP":
            path = tuple(Coord.from_dict(p) for p in data["path"])
            if len(path) < 2:
                raise ValueError("Jump path needs at least two squares")
            return Jump(path)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed move: {data!r}") from e
    raise ValueError(f"Unknown move type: {kind!r}")
