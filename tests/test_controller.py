"""GameController 单元测试 - 发牌、弃牌、摆牌门槛、结算与轮换"""

import random
from typing import List, Optional

import pytest
from ongdu.engine.card import Card
from ongdu.engine.arrangement import Arrangement
from ongdu.engine.validator import is_valid_arrangement
from ongdu.game.player import Player
from ongdu.game.game_state import GameConfig, GamePhase, GameState
from ongdu.game.controller import GameController, HUMAN_ID
from ongdu.ai.optimal_ai import find_best_arrangement, OptimalAI


# ============================================================
#  辅助工具
# ============================================================

class FoulAI:
    """永远不摆牌的 AI（按犯规处理），弃第一张"""

    def decide_discard(self, player: Player, state: GameState) -> Card:
        return player.hand[0]

    def decide_arrangement(self, player: Player, state: GameState) -> Optional[Arrangement]:
        return None


class SearchAI(FoulAI):
    """弃第一张，摆牌用穷举搜索"""

    def decide_arrangement(self, player: Player, state: GameState) -> Optional[Arrangement]:
        return find_best_arrangement(player.hand)


class FakeSleep:

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _make_controller(count: int = 4, strategies=None, seed: int = 7, **kwargs) -> GameController:
    config = GameConfig(player_count=count, ai_delay=kwargs.pop("ai_delay", (0.0, 0.0)), **kwargs)
    if strategies is None:
        strategies = [FoulAI() for _ in range(config.ai_count)]
    return GameController(config, strategies=strategies, rng=random.Random(seed), sleep=FakeSleep())


# ============================================================
#  配置与开局
# ============================================================

class TestSetup:

    def test_ai_names_and_ids(self):
        gc = _make_controller(3)
        assert [p.id for p in gc.players] == ["ai-0", "ai-1", "ai-2"]
        assert [p.name for p in gc.players] == ["Dragon", "Phoenix", "Tiger"]
        assert all(p.cash == 1000 for p in gc.players)

    def test_human_seat(self):
        gc = _make_controller(2, human_name="你")
        assert gc.players[0].id == HUMAN_ID
        assert gc.players[0].is_human
        assert len(gc.strategies) == 1

    @pytest.mark.parametrize("count", [1, 7])
    def test_player_count_bounds(self, count):
        with pytest.raises(ValueError):
            GameConfig(player_count=count)

    def test_bad_cash(self):
        with pytest.raises(ValueError):
            GameConfig(starting_cash=0)

    def test_strategy_count_mismatch(self):
        with pytest.raises(ValueError):
            GameController(GameConfig(player_count=3), strategies=[FoulAI()])

    def test_default_strategies(self):
        gc = GameController(GameConfig(player_count=2))
        assert all(isinstance(s, OptimalAI) for s in gc.strategies.values())


class TestDeal:

    def test_four_players(self):
        gc = _make_controller(4)
        gc.start_game()
        assert [p.hand_size for p in gc.players] == [9, 9, 9, 9]
        assert len(gc.state.deck) == 55 - 36
        assert gc.state.phase == GamePhase.ARRANGEMENT

    def test_six_players_discard(self):
        gc = _make_controller(6)
        gc.start_game()
        starter = gc.state.starting_player
        assert gc.state.phase == GamePhase.DISCARD
        assert starter.hand_size == 10
        assert sum(p.hand_size for p in gc.players) == 55

        first = starter.hand[0]
        gc.run_discard()
        assert starter.hand_size == 9
        assert gc.state.discard_pile == [first]
        assert not starter.has_card(first)
        assert gc.state.phase == GamePhase.ARRANGEMENT

    def test_discard_by_non_starter_raises(self):
        gc = _make_controller(6)
        gc.start_game()
        other = next(p for p in gc.players if p is not gc.state.starting_player)
        with pytest.raises(ValueError):
            gc.submit_discard(other.id, other.hand[0])

    def test_discard_card_not_in_hand_raises(self):
        gc = _make_controller(6)
        gc.start_game()
        starter = gc.state.starting_player
        other = next(p for p in gc.players if p is not starter)
        with pytest.raises(ValueError):
            gc.submit_discard(starter.id, other.hand[0])

    def test_discard_outside_phase_raises(self):
        gc = _make_controller(4)
        gc.start_game()
        p = gc.players[0]
        with pytest.raises(ValueError):
            gc.submit_discard(p.id, p.hand[0])


# ============================================================
#  摆牌门槛
# ============================================================

class TestHumanArrangement:

    def setup_method(self):
        self.gc = _make_controller(2, human_name="你", strategies=[SearchAI()])
        self.gc.start_game()
        self.human = self.gc.get_player(HUMAN_ID)

    def test_ai_waits_for_human(self):
        assert self.gc.run_ai_arrangements() is False
        assert not any(p.is_ready for p in self.gc.players)

    def test_incomplete_rejected(self):
        assert self.gc.submit_arrangement(HUMAN_ID, Arrangement.empty()) is False
        assert not self.human.is_ready
        assert self.human.arrangement is None

    def test_foreign_cards_rejected(self):
        ai = self.gc.players[1]
        arrangement = find_best_arrangement(ai.hand)
        assert self.gc.submit_arrangement(HUMAN_ID, arrangement) is False

    def test_foul_order_rejected(self):
        best = find_best_arrangement(self.human.hand)
        swapped = Arrangement(top=best.bottom, middle=best.middle, bottom=best.top)
        if is_valid_arrangement(swapped):
            pytest.skip("三道同级，交换后仍合法")
        assert self.gc.submit_arrangement(HUMAN_ID, swapped) is False
        assert not self.human.is_ready

    def test_full_round(self):
        arrangement = find_best_arrangement(self.human.hand)
        assert self.gc.submit_arrangement(HUMAN_ID, arrangement) is True
        assert self.human.is_ready
        assert self.gc.run_ai_arrangements() is True
        assert self.gc.all_ready()

        self.gc.reveal()
        scores = self.gc.run_scoring()
        assert sum(s.total_points for s in scores) == 0
        assert self.gc.state.phase == GamePhase.SCORING
        assert sum(p.cash for p in self.gc.players) == 2000

    def test_reveal_before_ready_raises(self):
        with pytest.raises(ValueError):
            self.gc.reveal()


# ============================================================
#  AI 节奏与事件
# ============================================================

class TestPacing:

    def test_sequential_delays(self):
        gc = _make_controller(4, ai_delay=(0.5, 1.5))
        gc.start_game()
        gc.run_ai_arrangements()
        assert len(gc._sleep.calls) == 4
        assert all(0.5 <= d <= 1.5 for d in gc._sleep.calls)

    def test_zero_delay_skips_sleep(self):
        gc = _make_controller(3)
        gc.start_game()
        gc.run_ai_arrangements()
        assert gc._sleep.calls == []

    def test_events(self):
        gc = _make_controller(3)
        actions = []
        gc.on_event(lambda e: actions.append(e.action))
        gc.start_game()
        gc.play_round()
        assert actions == ["deal", "arrange", "arrange", "arrange", "reveal", "score"]


# ============================================================
#  轮换、破产与整场
# ============================================================

class TestRounds:

    def test_rotation_anticlockwise(self):
        gc = _make_controller(3)
        gc.start_game()
        start = gc.state.starting_player_index
        gc.play_round()
        assert gc.next_round() is True
        assert gc.state.starting_player_index == (start + 2) % 3
        assert gc.state.current_round == 2
        assert all(p.hand_size == 9 and not p.is_ready for p in gc.players)

    def test_all_foul_no_cash_change(self):
        gc = _make_controller(4)
        gc.start_game()
        scores = gc.play_round()
        assert all(s.cash_change == 0 for s in scores)

    def test_bankruptcy_ends_game(self):
        gc = _make_controller(2, strategies=[FoulAI(), SearchAI()], starting_cash=5)
        gc.start_game()
        gc.play_round()
        loser, survivor = gc.players
        assert loser.cash == -5
        assert loser.is_bankrupt
        assert survivor.cash == 15

        assert gc.next_round() is False
        assert gc.state.phase == GamePhase.GAME_OVER
        assert gc.winner.id == survivor.id

    def test_run_game_round_limit(self):
        gc = _make_controller(3)
        state = gc.run_game(max_rounds=3)
        assert state.current_round == 3
        assert state.phase == GamePhase.SCORING

    def test_run_game_stops_on_bankruptcy(self):
        gc = _make_controller(2, strategies=[FoulAI(), SearchAI()], starting_cash=5)
        state = gc.run_game(max_rounds=5)
        assert state.phase == GamePhase.GAME_OVER
        assert state.current_round == 1
