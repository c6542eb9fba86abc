"""牌型定义 - 三张一组的六种牌型"""

from enum import IntEnum
from dataclasses import dataclass


class HandCategory(IntEnum):
    """牌型枚举（数值越小牌型越大）"""
    THREE_OF_KIND_PURE = 1      # 纯三条（不含癞子）
    STRAIGHT_FLUSH_JQK = 2      # 同花 J-Q-K
    STRAIGHT_JQK = 3            # 杂花 J-Q-K
    THREE_OF_KIND_WILD = 4      # 带癞子的三条
    THREE_FACE_CARDS = 5        # 三公（J/Q/K 任意组合）
    SUM_MODULO = 6              # 点数（总和取个位）


# 牌型中文名
CATEGORY_NAME = {
    HandCategory.THREE_OF_KIND_PURE: "三条",
    HandCategory.STRAIGHT_FLUSH_JQK: "同花JQK",
    HandCategory.STRAIGHT_JQK: "顺子JQK",
    HandCategory.THREE_OF_KIND_WILD: "癞子三条",
    HandCategory.THREE_FACE_CARDS: "三公",
    HandCategory.SUM_MODULO: "点数",
}

# 同类之间强制打平的牌型
FORCED_TIE_CATEGORIES = frozenset({
    HandCategory.STRAIGHT_FLUSH_JQK,
    HandCategory.STRAIGHT_JQK,
})

# 赢下一道时，按赢家牌型计分
WIN_POINTS = {
    HandCategory.THREE_OF_KIND_PURE: 5,
    HandCategory.THREE_OF_KIND_WILD: 5,
    HandCategory.STRAIGHT_FLUSH_JQK: 3,
    HandCategory.STRAIGHT_JQK: 3,
    HandCategory.THREE_FACE_CARDS: 3,
}
SUM_MODULO_POINTS = 1
SAME_SUIT_POINTS = 3


@dataclass(frozen=True)
class HandEvaluation:
    """一道牌的评估结果"""
    category: HandCategory
    value: int                # 同牌型比大小用
    same_suit: bool = False   # 仅对点数牌型有意义
    description: str = ""

    @property
    def win_points(self) -> int:
        """以此牌赢下一道可得的分数"""
        if self.category == HandCategory.SUM_MODULO:
            return SAME_SUIT_POINTS if self.same_suit else SUM_MODULO_POINTS
        return WIN_POINTS[self.category]

    @property
    def name(self) -> str:
        return CATEGORY_NAME[self.category]

    def __repr__(self) -> str:
        return f"[{self.category.name}:{self.value}] {self.description}"


# 非法输入时的兜底结果：最弱牌型、0 点
INVALID_EVALUATION = HandEvaluation(HandCategory.SUM_MODULO, 0, False, "无效牌组")
