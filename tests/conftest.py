"""
Pytest configuration and fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from jumpfrog.board import Board  # noqa: E402
from jumpfrog.config import Config, set_config  # noqa: E402
from jumpfrog.types import Coord, Piece, Player  # noqa: E402


class FakeHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Manual clock: callbacks fire only when the test advances time."""

    def __init__(self, start_ms: int = 1_000_000):
        self.now = start_ms
        self._timers = []
        self._seq = 0

    def now_ms(self) -> int:
        return self.now

    def call_later(self, delay_ms, callback):
        handle = FakeHandle()
        self._seq += 1
        self._timers.append((self.now + delay_ms, self._seq, callback, handle))
        return handle

    def pending(self) -> int:
        return sum(1 for *_, h in self._timers if not h.cancelled)

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = sorted(
                (t for t in self._timers if t[0] <= target and not t[3].cancelled),
                key=lambda t: (t[0], t[1]),
            )
            if not due:
                break
            when, seq, callback, handle = due[0]
            self._timers.remove(due[0])
            self.now = when
            callback()
        self.now = target
        self._timers = [t for t in self._timers if not t[3].cancelled]


def place(board: Board, r: int, c: int, owner: Player, piece_id: str) -> Board:
    board.set_piece(Coord(r, c), Piece(piece_id, owner))
    return board


@pytest.fixture(autouse=True)
def default_config():
    """Use built-in defaults, never the user's settings file."""
    config = Config()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def empty_board():
    return Board.empty()


@pytest.fixture
def sample_board():
    """Create an initial board."""
    return Board.initial()


@pytest.fixture
def scheduler():
    return FakeScheduler()
