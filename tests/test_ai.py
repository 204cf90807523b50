"""
Tests for the algorithmic bot: evaluation, move ordering and search.
"""

import math
import time

import pytest

from jumpfrog.board import Board
from jumpfrog.types import Coord, Jump, Player, Step
from jumpfrog.movegen import list_legal_moves
from jumpfrog.game_state import apply_move
from jumpfrog.ai.algorithmic.eval import (
    DEFAULT_WEIGHTS,
    WIN_SCORE,
    evaluate_board,
    goal_distance,
    in_goal_zone,
)
from jumpfrog.ai.algorithmic.search import (
    ActionKind,
    AlphaBetaSearch,
    DIFFICULTY_CONFIGS,
    Difficulty,
    choose_bot_action,
    choose_greedy_move,
    count_forward_follow_ups,
    move_category,
    order_moves,
    root_bonus,
)

from conftest import place


def green_winning_board():
    board = Board.empty()
    for i, (r, c) in enumerate([(0, 1), (0, 3), (0, 5), (0, 7), (1, 0), (1, 2), (1, 4), (1, 6)], 1):
        place(board, r, c, Player.GREEN, f"G{i}")
    place(board, 5, 2, Player.BLACK, "B1")
    return board


class TestEvaluation:
    """Tests for board evaluation."""

    def test_goal_distance(self):
        assert goal_distance(Coord(7, 0), Player.GREEN) == 6
        assert goal_distance(Coord(1, 0), Player.GREEN) == 0
        assert goal_distance(Coord(0, 1), Player.GREEN) == 0
        assert goal_distance(Coord(0, 1), Player.BLACK) == 6
        assert goal_distance(Coord(6, 1), Player.BLACK) == 0
        assert in_goal_zone(Coord(1, 4), Player.GREEN)
        assert not in_goal_zone(Coord(2, 4), Player.GREEN)
        assert in_goal_zone(Coord(7, 4), Player.BLACK)

    def test_initial_position_is_balanced(self):
        board = Board.initial()
        green = evaluate_board(board, Player.GREEN)
        black = evaluate_board(board, Player.BLACK)
        # Every term cancels except the one-sided forward-jump bonus: each
        # back-row frog can hop over the front row
        assert green == black
        assert green == 6 * DEFAULT_WEIGHTS['forward_jump']

    def test_win_scores(self):
        board = green_winning_board()
        assert evaluate_board(board, Player.GREEN) == WIN_SCORE
        assert evaluate_board(board, Player.BLACK) == -WIN_SCORE

    def test_progress_is_rewarded(self):
        board = Board.initial()
        advanced = board.clone()
        piece = advanced.get_piece(Coord(6, 1))
        advanced.set_piece(Coord(6, 1), None)
        advanced.set_piece(Coord(3, 2), piece)
        assert evaluate_board(advanced, Player.GREEN) > evaluate_board(board, Player.GREEN)


class TestMoveOrdering:
    def test_categories(self):
        fwd_jump = Jump((Coord(4, 3), Coord(2, 1)))
        back_jump = Jump((Coord(4, 3), Coord(6, 5)))
        lateral_jump = Jump((Coord(0, 2), Coord(0, 4)))
        fwd_step = Step(Coord(4, 3), Coord(3, 2))
        lateral_step = Step(Coord(0, 2), Coord(0, 3))
        back_step = Step(Coord(4, 3), Coord(5, 2))

        assert move_category(fwd_jump, Player.GREEN) == 0
        assert move_category(lateral_jump, Player.GREEN) == 1
        assert move_category(fwd_step, Player.GREEN) == 2
        assert move_category(lateral_step, Player.GREEN) == 3
        assert move_category(back_jump, Player.GREEN) == 4
        assert move_category(back_step, Player.GREEN) == 5
        # Same move is a backward jump for BLACK
        assert move_category(fwd_jump, Player.BLACK) == 4

        shuffled = [back_step, lateral_step, back_jump, fwd_step, lateral_jump, fwd_jump]
        assert order_moves(shuffled, Player.GREEN) == [
            fwd_jump, lateral_jump, fwd_step, lateral_step, back_jump, back_step,
        ]

    def test_root_bonus(self, empty_board):
        place(empty_board, 4, 3, Player.GREEN, "G1")
        place(empty_board, 3, 2, Player.BLACK, "B1")
        place(empty_board, 1, 2, Player.BLACK, "B2")
        jump = Jump((Coord(4, 3), Coord(2, 1)))
        # (2,1) can continue over (1,2) to (0,3)
        assert count_forward_follow_ups(empty_board, jump, Player.GREEN) == 1
        assert root_bonus(empty_board, jump, Player.GREEN) == 30 + 14 + 2 * 12

        step = Step(Coord(4, 3), Coord(5, 4))
        assert count_forward_follow_ups(empty_board, step, Player.GREEN) == 0
        assert root_bonus(empty_board, step, Player.GREEN) == 5 - 20

    def test_follow_up_excludes_hop_back(self, empty_board):
        place(empty_board, 4, 3, Player.GREEN, "G1")
        place(empty_board, 5, 4, Player.BLACK, "B1")
        jump = Jump((Coord(4, 3), Coord(6, 5)))
        assert count_forward_follow_ups(empty_board, jump, Player.GREEN) == 0


class TestSearch:
    """Tests for the alpha-beta search."""

    def test_search_ranks_every_root_move(self):
        board = Board.initial()
        moves = order_moves(list_legal_moves(board, Player.GREEN), Player.GREEN)
        searcher = AlphaBetaSearch(Player.GREEN, DIFFICULTY_CONFIGS[Difficulty.EASY], 5000)
        result = searcher.search(board, moves)
        assert result.depth >= 1
        assert len(result.ranked) == len(moves)
        scores = [score for _, score in result.ranked]
        assert scores == sorted(scores, reverse=True)
        assert result.best_move in moves
        assert result.nodes > 0

    def test_bot_returns_legal_move(self):
        board = Board.initial()
        action = choose_bot_action(board, Player.BLACK, difficulty="HARD", time_limit_ms=200)
        assert action.kind == ActionKind.MOVE
        assert action.move in list_legal_moves(board, Player.BLACK)

    def test_tiny_budget_still_moves(self):
        board = Board.initial()
        action = choose_bot_action(board, Player.GREEN, difficulty=Difficulty.HARD, time_limit_ms=0)
        assert action.kind == ActionKind.MOVE
        assert action.move in list_legal_moves(board, Player.GREEN)

    def test_seeded_choice_is_reproducible(self):
        board = Board.initial()
        first = choose_bot_action(board, Player.GREEN, difficulty="EASY", time_limit_ms=5000, seed=42)
        second = choose_bot_action(board, Player.GREEN, difficulty="EASY", time_limit_ms=5000, seed=42)
        assert first == second

    def test_quiescence_extends_through_pending_jump(self, empty_board):
        place(empty_board, 4, 3, Player.GREEN, "G1")
        place(empty_board, 3, 2, Player.BLACK, "B1")
        searcher = AlphaBetaSearch(Player.GREEN, DIFFICULTY_CONFIGS[Difficulty.HARD], 5000)
        searcher.deadline = time.monotonic() + 60

        quiet = searcher._alphabeta(empty_board, 0, -math.inf, math.inf, True, 0)
        extended = searcher._alphabeta(empty_board, 0, -math.inf, math.inf, True, 1)

        after_jump = apply_move(empty_board, Jump((Coord(4, 3), Coord(2, 1))))
        assert quiet == evaluate_board(empty_board, Player.GREEN)
        assert extended == evaluate_board(after_jump, Player.GREEN)
        assert extended > quiet

    def test_unfinished_pass_falls_back_to_last_depth(self):
        class RunsOutAtDepthTwo(AlphaBetaSearch):
            def _score_root(self, board, moves, depth):
                if depth >= 2:
                    scored, _ = super()._score_root(board, moves[:1], depth)
                    return scored, False
                return super()._score_root(board, moves, depth)

        board = Board.initial()
        moves = order_moves(list_legal_moves(board, Player.GREEN), Player.GREEN)
        searcher = RunsOutAtDepthTwo(Player.GREEN, DIFFICULTY_CONFIGS[Difficulty.HARD], 5000)
        result = searcher.search(board, moves)
        assert result.depth == 1
        assert len(result.ranked) == len(moves)

    def test_partial_first_pass_is_kept(self):
        class RunsOutAtDepthOne(AlphaBetaSearch):
            def _score_root(self, board, moves, depth):
                scored, _ = super()._score_root(board, moves[:2], depth)
                return scored, False

        board = Board.initial()
        moves = order_moves(list_legal_moves(board, Player.GREEN), Player.GREEN)
        searcher = RunsOutAtDepthOne(Player.GREEN, DIFFICULTY_CONFIGS[Difficulty.HARD], 5000)
        result = searcher.search(board, moves)
        assert result.depth == 1
        assert {move for move, _ in result.ranked} == set(moves[:2])

    def test_mistakes_stay_within_top_moves(self):
        board = Board.initial()
        config = DIFFICULTY_CONFIGS[Difficulty.EASY]
        moves = order_moves(list_legal_moves(board, Player.GREEN), Player.GREEN)
        ranked = AlphaBetaSearch(Player.GREEN, config, 5000).search(board, moves).ranked
        top = [move for move, _ in ranked[:config.mistake_top_n]]

        for seed in range(10):
            action = choose_bot_action(board, Player.GREEN, difficulty="EASY", time_limit_ms=5000, seed=seed)
            assert action.move in top

    def test_no_moves_ends_turn(self, empty_board):
        # A lone frog boxed in on the edge row
        place(empty_board, 7, 0, Player.BLACK, "B1")
        place(empty_board, 6, 1, Player.GREEN, "G1")
        place(empty_board, 7, 1, Player.GREEN, "G2")
        place(empty_board, 5, 2, Player.GREEN, "G3")
        place(empty_board, 6, 0, Player.GREEN, "G4")
        place(empty_board, 7, 2, Player.GREEN, "G5")
        assert list_legal_moves(empty_board, Player.BLACK) == []
        action = choose_bot_action(empty_board, Player.BLACK)
        assert action.kind == ActionKind.END_TURN


class TestContinuationChoice:
    """The bot only continues a jump chain forward."""

    @pytest.mark.parametrize("difficulty", ["EASY", "MEDIUM", "HARD"])
    @pytest.mark.parametrize("seed", [0, 7, None])
    def test_only_backward_follow_ups_ends_turn(self, empty_board, difficulty, seed):
        # B1 just jumped (2,1) -> (4,3); BLACK moves toward row 7
        place(empty_board, 4, 3, Player.BLACK, "B1")
        place(empty_board, 3, 2, Player.GREEN, "G1")
        place(empty_board, 3, 4, Player.GREEN, "G2")
        action = choose_bot_action(
            empty_board, Player.BLACK,
            continuation_piece_id="B1",
            continuation_from=Coord(2, 1),
            difficulty=difficulty,
            time_limit_ms=200,
            seed=seed,
        )
        assert action.kind == ActionKind.END_TURN

    def test_forward_follow_up_is_played(self, empty_board):
        place(empty_board, 4, 3, Player.BLACK, "B1")
        place(empty_board, 3, 2, Player.GREEN, "G1")
        place(empty_board, 5, 4, Player.GREEN, "G2")
        place(empty_board, 0, 1, Player.BLACK, "B2")
        action = choose_bot_action(
            empty_board, Player.BLACK,
            continuation_piece_id="B1",
            continuation_from=Coord(2, 1),
            difficulty="HARD",
            time_limit_ms=200,
        )
        assert action.kind == ActionKind.MOVE
        assert action.move == Jump((Coord(4, 3), Coord(6, 5)))

    def test_other_pieces_ignored_during_chain(self, empty_board):
        place(empty_board, 4, 3, Player.BLACK, "B1")
        place(empty_board, 3, 2, Player.GREEN, "G1")
        # B2 has a forward jump of its own, but B1 is the chaining piece
        place(empty_board, 2, 5, Player.BLACK, "B2")
        place(empty_board, 3, 6, Player.GREEN, "G2")
        action = choose_bot_action(
            empty_board, Player.BLACK,
            continuation_piece_id="B1",
            continuation_from=Coord(2, 1),
        )
        assert action.kind == ActionKind.END_TURN


class TestGreedy:
    def test_greedy_takes_winning_move(self, empty_board):
        for i, (r, c) in enumerate([(0, 1), (0, 3), (0, 5), (0, 7), (1, 2), (1, 4), (1, 6)], 1):
            place(empty_board, r, c, Player.GREEN, f"G{i}")
        place(empty_board, 2, 1, Player.GREEN, "G8")
        move = choose_greedy_move(empty_board, Player.GREEN)
        assert move == Step(Coord(2, 1), Coord(1, 0))

    def test_greedy_without_moves(self, empty_board):
        assert choose_greedy_move(empty_board, Player.GREEN) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
