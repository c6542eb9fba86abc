"""结算 - 两两比牌、整轮计分与资金变动"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from ongdu.engine.arrangement import LayerName, LAYER_ORDER
from ongdu.engine.hand_evaluator import evaluate_hand, compare_hands, hand_points
from ongdu.engine.special_hand import has_special_hand
from ongdu.engine.validator import is_valid_arrangement
from ongdu.game.player import Player

logger = logging.getLogger(__name__)

# 特殊牌 / 对方犯规时的固定得分
FLAT_WIN_POINTS = 10

# 1 分 = 1 元
CASH_PER_POINT = 1


@dataclass
class LayerComparison:
    """一道的比牌结果"""
    layer: LayerName
    a_value: int
    b_value: int
    winner_id: Optional[str]     # None 表示平
    points: int = 0              # 赢家在这一道拿到的分


@dataclass
class MatchupResult:
    """两位玩家之间的比牌结果"""
    a_id: str
    b_id: str
    a_foul: bool = False
    b_foul: bool = False
    a_special: bool = False
    b_special: bool = False
    layers: List[LayerComparison] = field(default_factory=list)
    a_points: int = 0
    b_points: int = 0

    @property
    def net_for_a(self) -> int:
        return self.a_points - self.b_points


@dataclass
class RoundScore:
    """一位玩家本轮的结算"""
    player_id: str
    player_name: str
    points_against: Dict[str, int] = field(default_factory=dict)   # 对手 id -> 净分
    total_points: int = 0
    cash_change: int = 0


def is_foul(player: Player) -> bool:
    """没有摆牌或摆牌不合法即犯规"""
    return player.arrangement is None or not is_valid_arrangement(player.arrangement)


def compare_players(a: Player, b: Player) -> MatchupResult:
    """
    比较两位玩家的摆牌。规则按顺序，先命中者为准：
    1. 双方都有特殊牌 → 平
    2. 一方有特殊牌 → 该方得 10 分（对方犯规也一样）
    3. 双方都犯规 → 平
    4. 一方犯规 → 另一方得 10 分
    5. 逐道比牌，赢家按自己的牌型得分，平局各得 0 分
    """
    result = MatchupResult(a_id=a.id, b_id=b.id, a_foul=is_foul(a), b_foul=is_foul(b))
    result.a_special = not result.a_foul and has_special_hand(a.arrangement)
    result.b_special = not result.b_foul and has_special_hand(b.arrangement)

    if result.a_special and result.b_special:
        return result
    if result.a_special:
        result.a_points = FLAT_WIN_POINTS
        return result
    if result.b_special:
        result.b_points = FLAT_WIN_POINTS
        return result

    if result.a_foul and result.b_foul:
        return result
    if result.a_foul:
        result.b_points = FLAT_WIN_POINTS
        return result
    if result.b_foul:
        result.a_points = FLAT_WIN_POINTS
        return result

    for name in LAYER_ORDER:
        a_eval = evaluate_hand(a.arrangement.layer(name))
        b_eval = evaluate_hand(b.arrangement.layer(name))
        outcome = compare_hands(a_eval, b_eval)

        comparison = LayerComparison(name, a_eval.value, b_eval.value, None)
        if outcome > 0:
            comparison.winner_id = a.id
            comparison.points = hand_points(a_eval)
            result.a_points += comparison.points
        elif outcome < 0:
            comparison.winner_id = b.id
            comparison.points = hand_points(b_eval)
            result.b_points += comparison.points
        result.layers.append(comparison)

    return result


def score_round(players: List[Player]) -> List[RoundScore]:
    """
    整轮结算：未破产玩家两两比牌，净分记入双方账上。
    所有玩家 total_points 之和恒为 0。
    """
    active = [p for p in players if not p.is_bankrupt]
    scores = {p.id: RoundScore(player_id=p.id, player_name=p.name) for p in active}

    for i in range(len(active)):
        for j in range(i + 1, len(active)):
            a, b = active[i], active[j]
            net = compare_players(a, b).net_for_a

            scores[a.id].points_against[b.id] = net
            scores[b.id].points_against[a.id] = -net
            scores[a.id].total_points += net
            scores[b.id].total_points -= net

    for score in scores.values():
        score.cash_change = score.total_points * CASH_PER_POINT

    return [scores[p.id] for p in active]


def apply_round_scores(players: List[Player], scores: List[RoundScore]) -> List[Player]:
    """按结算更新资金，返回新的玩家列表；资金 ≤ 0 即破产"""
    by_id = {s.player_id: s for s in scores}
    updated = []
    for p in players:
        score = by_id.get(p.id)
        if score is None:
            updated.append(p)
            continue
        cash = p.cash + score.cash_change
        if cash <= 0 < p.cash:
            logger.info("玩家 %s 破产 (资金 %d)", p.name, cash)
        updated.append(replace(p, cash=cash, is_bankrupt=cash <= 0))
    return updated


def should_game_end(players: List[Player]) -> bool:
    """有人破产即结束"""
    return any(p.is_bankrupt for p in players)


def find_winner(players: List[Player]) -> Optional[Player]:
    """资金最多的未破产玩家（并列取先出现者）"""
    active = [p for p in players if not p.is_bankrupt]
    if not active:
        return None
    winner = active[0]
    for p in active[1:]:
        if p.cash > winner.cash:
            winner = p
    return winner
