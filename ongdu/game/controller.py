"""牌桌控制器 - 驱动翁杜一轮又一轮的完整流程"""

import logging
import random
import time
from typing import Callable, Dict, List, Optional, Protocol

from ongdu.engine.card import Card, create_deck, shuffle_and_deal
from ongdu.engine.arrangement import Arrangement
from ongdu.engine.validator import is_valid_arrangement, is_complete_for
from ongdu.game.player import Player
from ongdu.game.game_state import GameState, GamePhase, GameEvent, GameConfig, AI_NAMES
from ongdu.game.scoring import (
    RoundScore, score_round, apply_round_scores, should_game_end, find_winner,
)

logger = logging.getLogger(__name__)

HUMAN_ID = "human"


class AIStrategy(Protocol):
    """AI 决策接口（策略模式）"""

    def decide_discard(self, player: Player, state: GameState) -> Card:
        """六人局首家决定弃哪张牌"""
        ...

    def decide_arrangement(self, player: Player, state: GameState) -> Optional[Arrangement]:
        """决定摆牌：返回完整摆牌，None 视为犯规"""
        ...


class GameController:
    """牌桌控制器：发牌、弃牌、摆牌、亮牌、结算、轮换首家"""

    def __init__(
        self,
        config: GameConfig,
        strategies: Optional[List[AIStrategy]] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.rng = rng or random.SystemRandom()
        self._sleep = sleep

        players: List[Player] = []
        if config.human_name:
            players.append(Player(
                id=HUMAN_ID, name=config.human_name, is_human=True, cash=config.starting_cash,
            ))
        for i in range(config.ai_count):
            players.append(Player(id=f"ai-{i}", name=AI_NAMES[i], cash=config.starting_cash))

        if strategies is None:
            from ongdu.ai.optimal_ai import OptimalAI
            strategies = [OptimalAI() for _ in range(config.ai_count)]
        if len(strategies) != config.ai_count:
            raise ValueError(f"需要 {config.ai_count} 个 AI 策略，实际 {len(strategies)} 个")

        ai_players = [p for p in players if not p.is_human]
        self.strategies: Dict[str, AIStrategy] = {
            p.id: s for p, s in zip(ai_players, strategies)
        }
        self.state = GameState(players=players)
        self._callbacks: List = []  # 事件回调（用于 UI 通知）

    @property
    def players(self) -> List[Player]:
        return self.state.players

    def on_event(self, callback) -> None:
        """注册事件回调"""
        self._callbacks.append(callback)

    def _emit(self, event: GameEvent) -> None:
        """触发事件通知"""
        self.state.events.append(event)
        for cb in self._callbacks:
            cb(event)

    def _require_phase(self, phase: GamePhase) -> None:
        if self.state.phase != phase:
            raise ValueError(f"当前阶段为 {self.state.phase.value}，无法执行 {phase.value} 操作")

    def get_player(self, player_id: str) -> Player:
        for p in self.players:
            if p.id == player_id:
                return p
        raise ValueError(f"未知玩家: {player_id}")

    # ============================================================
    #  发牌阶段
    # ============================================================

    def start_game(self) -> None:
        """开局：随机选首家并发第一轮牌"""
        self.state.starting_player_index = self.rng.randrange(len(self.players))
        self.state.current_round = 1
        self.deal()

    def deal(self) -> None:
        """洗牌发牌；六人局进入弃牌阶段，否则直接摆牌"""
        s = self.state
        s.phase = GamePhase.DEALING
        hands, remaining = shuffle_and_deal(
            create_deck(), len(self.players), s.starting_player_index, self.rng,
        )
        for player, hand in zip(self.players, hands):
            player.reset_for_new_round()
            player.hand = hand
            player.sort_hand()

        s.deck = remaining
        s.discard_pile = []
        s.round_scores = None
        logger.info("第 %d 轮发牌，首家 %s", s.current_round, s.starting_player.name)
        self._emit(GameEvent(GamePhase.DEALING, None, "deal", s.current_round))

        s.phase = GamePhase.DISCARD if s.needs_discard else GamePhase.ARRANGEMENT

    # ============================================================
    #  弃牌阶段（仅六人局）
    # ============================================================

    def submit_discard(self, player_id: str, card: Card) -> None:
        """首家弃掉一张牌，然后进入摆牌阶段"""
        self._require_phase(GamePhase.DISCARD)
        player = self.get_player(player_id)
        if player is not self.state.starting_player:
            raise ValueError(f"{player.name} 不是本轮首家，不能弃牌")
        if not player.has_card(card):
            raise ValueError(f"{player.name} 手中没有 {card}")

        player.remove_card(card)
        self.state.discard_pile.append(card)
        self._emit(GameEvent(GamePhase.DISCARD, player.id, "discard", card))
        self.state.phase = GamePhase.ARRANGEMENT

    def run_discard(self) -> None:
        """首家是 AI 时替它弃牌；首家是真人则等待 submit_discard"""
        if self.state.phase != GamePhase.DISCARD:
            return
        player = self.state.starting_player
        if player.is_human:
            return
        self._pace()
        card = self.strategies[player.id].decide_discard(player, self.state)
        self.submit_discard(player.id, card)

    # ============================================================
    #  摆牌阶段
    # ============================================================

    def submit_arrangement(self, player_id: str, arrangement: Arrangement) -> bool:
        """
        真人确认摆牌。
        必须恰好用完手牌且三道合法才会被接受，否则返回 False、保持未确认。
        """
        self._require_phase(GamePhase.ARRANGEMENT)
        player = self.get_player(player_id)
        if not is_complete_for(arrangement, player.hand):
            logger.warning("玩家 %s 的摆牌不完整或与手牌不符", player.name)
            return False
        if not is_valid_arrangement(arrangement):
            logger.warning("玩家 %s 的摆牌违反头道≤中道≤尾道", player.name)
            return False

        player.arrangement = arrangement
        player.is_ready = True
        self._emit(GameEvent(GamePhase.ARRANGEMENT, player.id, "arrange", arrangement))
        return True

    def humans_ready(self) -> bool:
        return all(p.is_ready for p in self.players if p.is_human)

    def all_ready(self) -> bool:
        return all(p.is_ready for p in self.players)

    def pending_ai_players(self) -> List[Player]:
        return [p for p in self.players if not p.is_human and not p.is_ready]

    def arrange_ai_player(self, player: Player) -> None:
        """让一位 AI 摆牌（不合法的结果照样记录，结算时按犯规处理）"""
        self._require_phase(GamePhase.ARRANGEMENT)
        player.arrangement = self.strategies[player.id].decide_arrangement(player, self.state)
        player.is_ready = True
        self._emit(GameEvent(GamePhase.ARRANGEMENT, player.id, "arrange", player.arrangement))

    def run_ai_arrangements(self) -> bool:
        """
        真人全部确认后，AI 逐个摆牌，每个之前有一段停顿。
        返回 False 表示还在等真人。
        """
        self._require_phase(GamePhase.ARRANGEMENT)
        if not self.humans_ready():
            return False
        for player in self.pending_ai_players():
            self._pace()
            self.arrange_ai_player(player)
        return True

    def _pace(self) -> None:
        """AI 决策前的停顿，只为观感"""
        low, high = self.config.ai_delay
        delay = self.rng.uniform(low, high)
        if delay > 0:
            self._sleep(delay)

    # ============================================================
    #  亮牌与结算
    # ============================================================

    def reveal(self) -> None:
        """所有人确认后亮牌"""
        self._require_phase(GamePhase.ARRANGEMENT)
        if not self.all_ready():
            raise ValueError("还有玩家没有确认摆牌")
        self.state.phase = GamePhase.REVEAL
        self._emit(GameEvent(GamePhase.REVEAL, None, "reveal"))

    def run_scoring(self) -> List[RoundScore]:
        """两两比牌并更新资金"""
        self._require_phase(GamePhase.REVEAL)
        s = self.state
        scores = score_round(self.players)
        s.players = apply_round_scores(self.players, scores)
        s.round_scores = scores
        s.phase = GamePhase.SCORING

        logger.info(
            "第 %d 轮结算: %s", s.current_round,
            ", ".join(f"{sc.player_name}{sc.cash_change:+d}" for sc in scores),
        )
        self._emit(GameEvent(GamePhase.SCORING, None, "score", scores))
        return scores

    def next_round(self) -> bool:
        """
        进入下一轮：有人破产则游戏结束并返回 False；
        否则首家逆时针轮换一位，重新发牌。
        """
        self._require_phase(GamePhase.SCORING)
        s = self.state
        if should_game_end(self.players):
            s.phase = GamePhase.GAME_OVER
            winner = find_winner(self.players)
            logger.info("游戏结束，胜者: %s", winner.name if winner else "无")
            self._emit(GameEvent(GamePhase.GAME_OVER, winner.id if winner else None, "game_over", winner))
            return False

        n = len(self.players)
        s.starting_player_index = (s.starting_player_index + n - 1) % n
        s.current_round += 1
        self.deal()
        return True

    @property
    def winner(self) -> Optional[Player]:
        return find_winner(self.players)

    # ============================================================
    #  完整流程入口（全 AI 牌桌）
    # ============================================================

    def play_round(self) -> List[RoundScore]:
        """跑完当前一轮：弃牌 → AI 摆牌 → 亮牌 → 结算"""
        self.run_discard()
        self.run_ai_arrangements()
        self.reveal()
        return self.run_scoring()

    def run_game(self, max_rounds: int = 10) -> GameState:
        """
        连续对局，直到有人破产或达到 max_rounds。
        达到上限时停在最后一轮的结算阶段。
        """
        self.start_game()
        for played in range(1, max_rounds + 1):
            self.play_round()
            if played == max_rounds and not should_game_end(self.players):
                break
            if not self.next_round():
                break
        return self.state
