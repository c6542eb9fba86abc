"""玩家模型 - 翁杜 2~6 人牌桌的玩家数据结构"""

from dataclasses import dataclass, field
from typing import List, Optional

from ongdu.engine.card import Card, sort_cards
from ongdu.engine.arrangement import Arrangement


@dataclass
class Player:
    """一个玩家（由牌桌控制器持有并更新）"""
    id: str
    name: str
    is_human: bool = False
    cash: int = 1000
    hand: List[Card] = field(default_factory=list)
    arrangement: Optional[Arrangement] = None
    is_ready: bool = False           # 已确认摆牌
    is_bankrupt: bool = False

    @property
    def hand_size(self) -> int:
        return len(self.hand)

    def sort_hand(self) -> None:
        """手牌排序"""
        self.hand = sort_cards(self.hand)

    def has_card(self, card: Card) -> bool:
        return any(c.id == card.id for c in self.hand)

    def remove_card(self, card: Card) -> None:
        """从手牌中移除指定的牌"""
        self.hand = [c for c in self.hand if c.id != card.id]

    def reset_for_new_round(self) -> None:
        """新一轮重置"""
        self.hand = []
        self.arrangement = None
        self.is_ready = False
