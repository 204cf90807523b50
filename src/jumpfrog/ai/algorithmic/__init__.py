"""Heuristic evaluation and alpha-beta search."""

from .eval import evaluate_board
from .search import (
    ActionKind,
    BotAction,
    Difficulty,
    choose_bot_action,
    choose_greedy_move,
)

__all__ = [
    'evaluate_board',
    'ActionKind',
    'BotAction',
    'Difficulty',
    'choose_bot_action',
    'choose_greedy_move',
]
