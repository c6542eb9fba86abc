"""牌的定义 - 翁杜 55 张牌（52 张标准牌 + 3 张癞子）的数据模型"""

from enum import IntEnum, Enum
from dataclasses import dataclass
from typing import List, Optional, Tuple
import random


class Rank(IntEnum):
    """点数枚举（数值即比大小用的点数，A 最大，癞子为 0）"""
    WILD = 0
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


class Suit(str, Enum):
    """花色枚举"""
    SPADE = "♠"
    HEART = "♥"
    DIAMOND = "♦"
    CLUB = "♣"
    WILD = "🃏"


STANDARD_SUITS = [Suit.HEART, Suit.DIAMOND, Suit.CLUB, Suit.SPADE]
STANDARD_RANKS = [r for r in Rank if r != Rank.WILD]
FACE_RANKS = frozenset({Rank.JACK, Rank.QUEEN, Rank.KING})

WILD_COUNT = 3
DECK_SIZE = len(STANDARD_SUITS) * len(STANDARD_RANKS) + WILD_COUNT

# 点数显示映射
RANK_DISPLAY = {
    Rank.TWO: "2", Rank.THREE: "3", Rank.FOUR: "4",
    Rank.FIVE: "5", Rank.SIX: "6", Rank.SEVEN: "7",
    Rank.EIGHT: "8", Rank.NINE: "9", Rank.TEN: "10",
    Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K",
    Rank.ACE: "A", Rank.WILD: "WILD",
}

# 算点数用的牌值：A=1，J/Q/K=10，癞子=0
SCORING_VALUES = {
    Rank.ACE: 1, Rank.TWO: 2, Rank.THREE: 3, Rank.FOUR: 4,
    Rank.FIVE: 5, Rank.SIX: 6, Rank.SEVEN: 7, Rank.EIGHT: 8,
    Rank.NINE: 9, Rank.TEN: 10, Rank.JACK: 10, Rank.QUEEN: 10,
    Rank.KING: 10, Rank.WILD: 0,
}

_SUIT_IDS = {
    Suit.SPADE: "spades", Suit.HEART: "hearts",
    Suit.DIAMOND: "diamonds", Suit.CLUB: "clubs",
}


@dataclass(frozen=True)
class Card:
    """一张牌（不可变）。is_wild 与癞子花色/点数必须一致"""
    id: str
    rank: Rank
    suit: Suit
    is_wild: bool = False

    def __post_init__(self) -> None:
        sentinel = (self.rank == Rank.WILD, self.suit == Suit.WILD)
        if sentinel != (self.is_wild, self.is_wild):
            raise ValueError(f"癞子标记与花色/点数不一致: {self.id}")

    @classmethod
    def standard(cls, rank: Rank, suit: Suit) -> "Card":
        return cls(id=f"{RANK_DISPLAY[rank]}-{_SUIT_IDS[suit]}", rank=rank, suit=suit)

    @classmethod
    def wild(cls, number: int) -> "Card":
        return cls(id=f"wild-{number}", rank=Rank.WILD, suit=Suit.WILD, is_wild=True)

    @property
    def comparison_value(self) -> int:
        """比大小用的点数：2..10，J=11，Q=12，K=13，A=14，癞子=0"""
        return int(self.rank)

    @property
    def scoring_value(self) -> int:
        """算点数用的牌值"""
        return SCORING_VALUES[self.rank]

    @property
    def is_face(self) -> bool:
        return self.rank in FACE_RANKS

    @property
    def display(self) -> str:
        if self.is_wild:
            return "🃏"
        return f"{self.suit.value}{RANK_DISPLAY[self.rank]}"

    def __repr__(self) -> str:
        return self.display

    def __lt__(self, other: "Card") -> bool:
        return self.rank < other.rank


def create_deck() -> List[Card]:
    """创建一副 55 张牌：52 张标准牌 + 3 张癞子"""
    deck: List[Card] = []
    for suit in STANDARD_SUITS:
        for rank in STANDARD_RANKS:
            deck.append(Card.standard(rank, suit))

    for i in range(1, WILD_COUNT + 1):
        deck.append(Card.wild(i))

    assert len(deck) == DECK_SIZE, f"牌数错误: {len(deck)}"
    return deck


def hand_size_for(num_players: int, player_index: int, starting_index: int) -> int:
    """六人局的首家拿 10 张（之后弃一张），其余一律 9 张"""
    if num_players == 6 and player_index == starting_index:
        return 10
    return 9


def shuffle_and_deal(
    deck: List[Card],
    num_players: int,
    starting_index: int = 0,
    rng: Optional[random.Random] = None,
) -> Tuple[List[List[Card]], List[Card]]:
    """洗牌并发牌: 返回 (每位玩家的手牌, 剩余牌堆)"""
    rng = rng or random.SystemRandom()
    shuffled = deck.copy()
    rng.shuffle(shuffled)

    hands: List[List[Card]] = []
    pos = 0
    for i in range(num_players):
        count = hand_size_for(num_players, i, starting_index)
        hands.append(shuffled[pos:pos + count])
        pos += count

    if pos > len(shuffled):
        raise ValueError(f"牌不够发: {num_players} 人需要 {pos} 张")
    return hands, shuffled[pos:]


def sort_cards(cards: List[Card]) -> List[Card]:
    """按点数排序手牌（从小到大，癞子在最前）"""
    return sorted(cards)
