"""摆牌校验 - 头道 ≤ 中道 ≤ 尾道"""

from collections import Counter
from typing import Dict, Iterable

from .card import Card
from .arrangement import Arrangement, LayerName, LAYER_ORDER, LAYER_SIZE
from .hand_type import HandEvaluation
from .hand_evaluator import evaluate_hand, compare_hands


def layer_evaluations(arrangement: Arrangement) -> Dict[LayerName, HandEvaluation]:
    """逐道评估（空位按无效牌组处理）"""
    return {name: evaluate_hand(arrangement.layer(name)) for name in LAYER_ORDER}


def is_valid_arrangement(arrangement: Arrangement) -> bool:
    """
    摆牌是否合法。
    任一道不满三张即不合法；头道大过中道或中道大过尾道也不合法，相等允许。
    """
    if any(len(arrangement.placed(name)) < LAYER_SIZE for name in LAYER_ORDER):
        return False

    evals = layer_evaluations(arrangement)
    if compare_hands(evals[LayerName.TOP], evals[LayerName.MIDDLE]) > 0:
        return False
    if compare_hands(evals[LayerName.MIDDLE], evals[LayerName.BOTTOM]) > 0:
        return False
    return True


def is_complete_for(arrangement: Arrangement, hand: Iterable[Card]) -> bool:
    """九张全部摆满，且恰好用了手里的每一张牌各一次"""
    if not arrangement.is_complete():
        return False
    return Counter(c.id for c in arrangement.all_cards()) == Counter(c.id for c in hand)
