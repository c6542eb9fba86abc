"""最优摆牌 AI - 穷举九张牌的所有分道方式，取启发分最高的合法摆牌"""

import logging
from enum import Enum
from itertools import combinations, permutations
from typing import Optional, Sequence

from ongdu.engine.card import Card
from ongdu.engine.arrangement import Arrangement, LAYER_ORDER
from ongdu.engine.hand_type import HandEvaluation
from ongdu.engine.hand_evaluator import evaluate_hand, compare_hands
from ongdu.engine.special_hand import has_special_hand
from ongdu.engine.validator import is_valid_arrangement
from ongdu.game.player import Player
from ongdu.game.game_state import GameState

logger = logging.getLogger(__name__)

HAND_SIZE = 9
DISCARD_HAND_SIZE = 10

# 特殊牌压倒一切普通摆牌
SPECIAL_HAND_SCORE = 10000

# 每升一档牌型的权重：牌型 1 → 600 … 牌型 6 → 100
CATEGORY_WEIGHT = 100
CATEGORY_CEILING = 7

INVALID_SCORE = float("-inf")


class SearchStrategy(str, Enum):
    """AI 难度，对应不同的摆牌打分方式"""
    OPTIMAL = "OPTIMAL"       # 牌型权重 + 同牌型比较值
    CAUTIOUS = "CAUTIOUS"     # 只看牌型，不区分同牌型大小


def _layer_score(ev: HandEvaluation, strategy: SearchStrategy) -> int:
    score = (CATEGORY_CEILING - ev.category) * CATEGORY_WEIGHT
    if strategy == SearchStrategy.OPTIMAL:
        score += ev.value
    return score


def score_arrangement(
    arrangement: Arrangement,
    strategy: SearchStrategy = SearchStrategy.OPTIMAL,
) -> float:
    """
    给摆牌打分（越高越好）。
    不完整或不合法 → -inf；特殊牌 → SPECIAL_HAND_SCORE；否则三道分数之和。
    """
    if not is_valid_arrangement(arrangement):
        return INVALID_SCORE
    if has_special_hand(arrangement):
        return SPECIAL_HAND_SCORE
    return sum(
        _layer_score(evaluate_hand(arrangement.layer(name)), strategy)
        for name in LAYER_ORDER
    )


def _ordered(top: HandEvaluation, middle: HandEvaluation, bottom: HandEvaluation) -> bool:
    """头道不大于中道，中道不大于尾道"""
    return compare_hands(top, middle) <= 0 and compare_hands(middle, bottom) <= 0


def find_best_arrangement(
    cards: Sequence[Card],
    strategy: SearchStrategy = SearchStrategy.OPTIMAL,
) -> Optional[Arrangement]:
    """
    穷举 C(9,3) × C(6,3) = 1680 种分组，每种分组再试 6 种头/中/尾分配，
    保留分数最高的合法摆牌（同分取先找到的）。
    不是九张牌时返回 None。
    """
    if len(cards) != HAND_SIZE:
        logger.warning("摆牌需要 %d 张牌，实际 %d 张", HAND_SIZE, len(cards))
        return None

    cards = list(cards)
    indices = range(HAND_SIZE)
    best: Optional[Arrangement] = None
    best_score = INVALID_SCORE

    for first in combinations(indices, 3):
        rest = [i for i in indices if i not in first]
        for second in combinations(rest, 3):
            third = tuple(i for i in rest if i not in second)
            groups = [[cards[i] for i in g] for g in (first, second, third)]
            evals = [evaluate_hand(g) for g in groups]

            for top, middle, bottom in permutations(range(3)):
                if not _ordered(evals[top], evals[middle], evals[bottom]):
                    continue
                candidate = Arrangement.from_groups(groups[top], groups[middle], groups[bottom])
                score = score_arrangement(candidate, strategy)
                if score > best_score:
                    best_score = score
                    best = candidate

    if best is None:
        logger.warning("没有找到合法摆牌，改用简单摆法: %s", cards)
        return simple_arrangement(cards)

    logger.debug("最优摆牌 %s 分数=%s", best, best_score)
    return best


def _sort_value(card: Card) -> int:
    return card.comparison_value


def simple_arrangement(cards: Sequence[Card]) -> Arrangement:
    """
    兜底摆法：非癞子按点数从大到小、癞子放最后，
    依次切成尾/中/头三道；不合法就反过来摆；仍不合法则按原顺序切分。
    """
    cards = list(cards)
    naturals = sorted((c for c in cards if not c.is_wild), key=_sort_value, reverse=True)
    ordered = naturals + [c for c in cards if c.is_wild]

    high_first = Arrangement.from_groups(ordered[6:9], ordered[3:6], ordered[0:3])
    if is_valid_arrangement(high_first):
        return high_first

    reversed_ = Arrangement.from_groups(ordered[0:3], ordered[3:6], ordered[6:9])
    if is_valid_arrangement(reversed_):
        return reversed_

    return Arrangement.from_groups(cards[0:3], cards[3:6], cards[6:9])


def choose_discard(
    cards: Sequence[Card],
    strategy: SearchStrategy = SearchStrategy.OPTIMAL,
) -> Card:
    """
    十张牌里选一张弃掉：逐张试弃，对剩下九张求最优摆牌，
    取摆牌分最高的那一张（同分取先试到的）。
    """
    if len(cards) != DISCARD_HAND_SIZE:
        logger.warning("弃牌需要 %d 张牌，实际 %d 张，默认弃第一张", DISCARD_HAND_SIZE, len(cards))
        return cards[0]

    best_card = cards[0]
    best_score = INVALID_SCORE
    for i, card in enumerate(cards):
        remaining = list(cards[:i]) + list(cards[i + 1:])
        arrangement = find_best_arrangement(remaining, strategy)
        score = score_arrangement(arrangement, strategy)
        if score > best_score:
            best_score = score
            best_card = card

    logger.debug("弃牌 %s (剩余摆牌分数=%s)", best_card, best_score)
    return best_card


class OptimalAI:
    """基于穷举搜索的 AI 策略"""

    def __init__(self, strategy: SearchStrategy = SearchStrategy.OPTIMAL):
        self.strategy = strategy

    def decide_discard(self, player: Player, state: GameState) -> Card:
        """六人局首家弃牌决策"""
        return choose_discard(player.hand, self.strategy)

    def decide_arrangement(self, player: Player, state: GameState) -> Optional[Arrangement]:
        """摆牌决策：手牌不是九张时返回 None（按犯规处理）"""
        return find_best_arrangement(player.hand, self.strategy)

    def __repr__(self) -> str:
        return f"OptimalAI({self.strategy.value})"
