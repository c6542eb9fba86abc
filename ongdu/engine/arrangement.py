"""摆牌结构 - 头道/中道/尾道三道，每道三张（不可变，改动即重建）"""

from enum import Enum
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple

from .card import Card


LAYER_SIZE = 3

Layer = Tuple[Optional[Card], ...]


class LayerName(str, Enum):
    """三道"""
    TOP = "top"         # 头道（最弱）
    MIDDLE = "middle"   # 中道
    BOTTOM = "bottom"   # 尾道（最强）


LAYER_ORDER = (LayerName.TOP, LayerName.MIDDLE, LayerName.BOTTOM)

EMPTY_LAYER: Layer = (None,) * LAYER_SIZE


def _as_layer(cards: Iterable[Optional[Card]]) -> Layer:
    layer = tuple(cards)
    if len(layer) != LAYER_SIZE:
        raise ValueError(f"每道必须是 {LAYER_SIZE} 个位置，实际 {len(layer)}")
    return layer


@dataclass(frozen=True)
class Arrangement:
    """一位玩家的三道摆牌，空位为 None"""
    top: Layer = EMPTY_LAYER
    middle: Layer = EMPTY_LAYER
    bottom: Layer = EMPTY_LAYER

    def __post_init__(self) -> None:
        for name in LAYER_ORDER:
            object.__setattr__(self, name.value, _as_layer(getattr(self, name.value)))

    @classmethod
    def empty(cls) -> "Arrangement":
        return cls()

    @classmethod
    def from_groups(
        cls,
        top: Iterable[Card],
        middle: Iterable[Card],
        bottom: Iterable[Card],
    ) -> "Arrangement":
        """由三组牌直接构造"""
        return cls(top=tuple(top), middle=tuple(middle), bottom=tuple(bottom))

    def layer(self, name: LayerName) -> Layer:
        return getattr(self, LayerName(name).value)

    def placed(self, name: LayerName) -> List[Card]:
        """某一道已摆上的牌"""
        return [c for c in self.layer(name) if c is not None]

    def with_card(self, name: LayerName, slot: int, card: Card) -> "Arrangement":
        """返回在指定位置放上 card 的新摆牌"""
        cards = list(self.layer(name))
        cards[slot] = card
        return replace(self, **{LayerName(name).value: tuple(cards)})

    def without_card(self, name: LayerName, slot: int) -> "Arrangement":
        """返回清空指定位置的新摆牌"""
        cards = list(self.layer(name))
        cards[slot] = None
        return replace(self, **{LayerName(name).value: tuple(cards)})

    def all_cards(self) -> List[Card]:
        """按头/中/尾顺序列出所有已摆的牌"""
        return [c for name in LAYER_ORDER for c in self.placed(name)]

    def is_complete(self) -> bool:
        """九个位置是否都已摆满"""
        return all(c is not None for name in LAYER_ORDER for c in self.layer(name))

    def __repr__(self) -> str:
        parts = []
        for name in LAYER_ORDER:
            cards = " ".join(c.display if c else "--" for c in self.layer(name))
            parts.append(f"{name.value}=[{cards}]")
        return f"Arrangement({', '.join(parts)})"
