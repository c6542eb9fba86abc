"""特殊牌检测 - 整手九张的奖励牌（四条 / 全九点），直接取代逐道比牌"""

from enum import Enum
from collections import Counter
from typing import Optional

from .arrangement import Arrangement, LAYER_ORDER, LAYER_SIZE
from .hand_type import HandCategory
from .hand_evaluator import evaluate_hand, WILD_SUM_VALUE


class SpecialHand(str, Enum):
    """特殊牌种类"""
    ALL_NINES = "ALL_NINES"             # 三道都是 9 点且无癞子
    FOUR_OF_A_KIND = "FOUR_OF_A_KIND"   # 九张中有四张同点


SPECIAL_HAND_NAME = {
    SpecialHand.ALL_NINES: "全九点",
    SpecialHand.FOUR_OF_A_KIND: "四条",
}


def is_all_nines(arrangement: Arrangement) -> bool:
    """
    三道都是点数牌型且为 9 点。
    与普通评估不同，这里任何一张癞子都会取消资格。
    """
    for name in LAYER_ORDER:
        cards = arrangement.placed(name)
        if len(cards) != LAYER_SIZE:
            return False
        if any(c.is_wild for c in cards):
            return False
        ev = evaluate_hand(cards)
        if ev.category != HandCategory.SUM_MODULO or ev.value < WILD_SUM_VALUE:
            return False
    return True


def is_four_of_a_kind(arrangement: Arrangement) -> bool:
    """已摆的牌中（不计癞子）某点数出现至少四次"""
    counts = Counter(c.rank for c in arrangement.all_cards() if not c.is_wild)
    return any(n >= 4 for n in counts.values())


def detect_special_hand(arrangement: Arrangement) -> Optional[SpecialHand]:
    """返回命中的特殊牌种类（全九点优先），两者不叠加"""
    if is_all_nines(arrangement):
        return SpecialHand.ALL_NINES
    if is_four_of_a_kind(arrangement):
        return SpecialHand.FOUR_OF_A_KIND
    return None


def has_special_hand(arrangement: Arrangement) -> bool:
    return detect_special_hand(arrangement) is not None
