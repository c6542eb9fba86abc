"""牌型识别器 - 识别三张一组的牌型并比较大小"""

from typing import List, Optional, Sequence
from collections import Counter

from .card import Card, Rank, FACE_RANKS, RANK_DISPLAY
from .hand_type import (
    HandCategory, HandEvaluation, INVALID_EVALUATION, FORCED_TIE_CATEGORIES,
)


# J-Q-K 系列牌型的固定比较值（同类必平）
JQK_VALUE = 100

# 带癞子的点数牌直接视为最大点 9
WILD_SUM_VALUE = 9


def evaluate_hand(cards: Sequence[Optional[Card]]) -> HandEvaluation:
    """
    识别一组三张牌的牌型。
    非三张或含空位时返回 INVALID_EVALUATION，不抛异常。
    """
    if len(cards) != 3 or any(c is None for c in cards):
        return INVALID_EVALUATION

    naturals = [c for c in cards if not c.is_wild]
    wilds = len(cards) - len(naturals)
    rank_counts = Counter(c.rank for c in naturals)

    # 按优先级依次尝试，先命中者为准
    return (
        _detect_pure_triple(naturals, wilds, rank_counts)
        or _detect_straight_flush(naturals, wilds, rank_counts)
        or _detect_straight(naturals, wilds, rank_counts)
        or _detect_wild_triple(naturals, wilds, rank_counts)
        or _detect_face_cards(naturals, wilds, rank_counts)
        or _sum_modulo(naturals, wilds)
    )


# ============================================================
#  辅助函数
# ============================================================

def _same_suit(naturals: List[Card]) -> bool:
    """非癞子牌是否同花（不超过一张时视为同花）"""
    return len({c.suit for c in naturals}) <= 1


def _completes_jqk(naturals: List[Card], wilds: int, rc: Counter) -> bool:
    """非癞子牌全为 J/Q/K，缺的点数用癞子补齐"""
    if any(r not in FACE_RANKS for r in rc):
        return False
    return len(FACE_RANKS) - len(rc) <= wilds


# ============================================================
#  牌型检测
# ============================================================

def _detect_pure_triple(naturals: List[Card], wilds: int, rc: Counter) -> Optional[HandEvaluation]:
    """纯三条：三张同点且无癞子"""
    if wilds == 0 and len(rc) == 1:
        rank = naturals[0].rank
        return HandEvaluation(
            HandCategory.THREE_OF_KIND_PURE, int(rank),
            description=f"三条 {RANK_DISPLAY[rank]}",
        )
    return None


def _detect_straight_flush(naturals: List[Card], wilds: int, rc: Counter) -> Optional[HandEvaluation]:
    """同花 J-Q-K（癞子可补）"""
    if _completes_jqk(naturals, wilds, rc) and _same_suit(naturals):
        return HandEvaluation(
            HandCategory.STRAIGHT_FLUSH_JQK, JQK_VALUE, description="同花 J-Q-K",
        )
    return None


def _detect_straight(naturals: List[Card], wilds: int, rc: Counter) -> Optional[HandEvaluation]:
    """杂花 J-Q-K（癞子可补）"""
    if _completes_jqk(naturals, wilds, rc):
        return HandEvaluation(
            HandCategory.STRAIGHT_JQK, JQK_VALUE, description="顺子 J-Q-K",
        )
    return None


def _detect_wild_triple(naturals: List[Card], wilds: int, rc: Counter) -> Optional[HandEvaluation]:
    """癞子三条：1~2 张癞子配同点牌，或三张全是癞子"""
    if wilds == 0 or len(rc) > 1:
        return None
    rank = naturals[0].rank if naturals else Rank.WILD
    label = RANK_DISPLAY[rank] if naturals else "癞子"
    return HandEvaluation(
        HandCategory.THREE_OF_KIND_WILD, int(rank),
        description=f"癞子三条 {label}",
    )


def _detect_face_cards(naturals: List[Card], wilds: int, rc: Counter) -> Optional[HandEvaluation]:
    """三公：每张都是癞子或 J/Q/K"""
    if all(c.is_face for c in naturals):
        return HandEvaluation(
            HandCategory.THREE_FACE_CARDS,
            sum(c.comparison_value for c in naturals),
            description="三公",
        )
    return None


def _sum_modulo(naturals: List[Card], wilds: int) -> HandEvaluation:
    """
    点数：牌值总和取个位，9 最大。
    有癞子时直接取 9；同花标记仍按非癞子牌单独计算。
    """
    same_suit = _same_suit(naturals)
    if wilds:
        value = WILD_SUM_VALUE
    else:
        value = sum(c.scoring_value for c in naturals) % 10

    suffix = "（同花）" if same_suit else ""
    return HandEvaluation(
        HandCategory.SUM_MODULO, value, same_suit,
        description=f"{value}点{suffix}",
    )


# ============================================================
#  牌型比较
# ============================================================

def compare_hands(h1: HandEvaluation, h2: HandEvaluation) -> int:
    """
    比较两道牌。
    返回 1 表示 h1 胜，-1 表示 h2 胜，0 为平。
    规则：
    1. 牌型编号小者胜
    2. 同为 J-Q-K 系列时必平
    3. 其余同牌型比 value
    """
    if h1.category != h2.category:
        return 1 if h1.category < h2.category else -1

    if h1.category in FORCED_TIE_CATEGORIES:
        return 0

    if h1.value > h2.value:
        return 1
    if h1.value < h2.value:
        return -1
    return 0


def hand_points(evaluation: HandEvaluation) -> int:
    """赢下一道时按赢家牌型计分"""
    return evaluation.win_points
