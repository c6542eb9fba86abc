"""牌桌状态 - 阶段、事件、配置与一局的完整状态"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from ongdu.engine.card import Card
from ongdu.game.player import Player
from ongdu.game.scoring import RoundScore


MIN_PLAYERS = 2
MAX_PLAYERS = 6

# 大厅可选的起始资金
STARTING_CASH_OPTIONS = (500, 1000, 2000, 5000)

# AI 玩家名
AI_NAMES = ["Dragon", "Phoenix", "Tiger", "Turtle", "Serpent", "Qilin"]


class GamePhase(str, Enum):
    """游戏阶段"""
    LOBBY = "LOBBY"                 # 大厅
    DEALING = "DEALING"             # 发牌中
    DISCARD = "DISCARD"             # 弃牌（仅六人局）
    ARRANGEMENT = "ARRANGEMENT"     # 摆牌中
    REVEAL = "REVEAL"               # 亮牌
    SCORING = "SCORING"             # 结算
    GAME_OVER = "GAME_OVER"         # 已结束


@dataclass
class GameEvent:
    """游戏事件记录"""
    phase: GamePhase
    player_id: Optional[str]
    action: str                  # "deal", "discard", "arrange", "reveal", "score", "game_over"
    data: Any = None


@dataclass
class GameConfig:
    """开局配置"""
    player_count: int = 4
    starting_cash: int = 1000
    human_name: Optional[str] = None              # None 表示全 AI 牌桌
    ai_delay: Tuple[float, float] = (0.5, 1.5)    # AI 摆牌前的停顿（秒）

    def __post_init__(self) -> None:
        if not MIN_PLAYERS <= self.player_count <= MAX_PLAYERS:
            raise ValueError(
                f"玩家人数须在 {MIN_PLAYERS}~{MAX_PLAYERS} 之间: {self.player_count}"
            )
        if self.starting_cash <= 0:
            raise ValueError(f"起始资金必须为正: {self.starting_cash}")
        low, high = self.ai_delay
        if low < 0 or high < low:
            raise ValueError(f"AI 停顿区间非法: {self.ai_delay}")

    @property
    def ai_count(self) -> int:
        return self.player_count - (1 if self.human_name else 0)


@dataclass
class GameState:
    """一局游戏的完整状态"""
    players: List[Player]
    phase: GamePhase = GamePhase.LOBBY
    deck: List[Card] = field(default_factory=list)
    discard_pile: List[Card] = field(default_factory=list)
    starting_player_index: int = 0
    current_round: int = 1
    round_scores: Optional[List[RoundScore]] = None

    # 事件日志
    events: List[GameEvent] = field(default_factory=list)

    @property
    def starting_player(self) -> Player:
        return self.players[self.starting_player_index]

    @property
    def needs_discard(self) -> bool:
        """六人局首家多拿一张，需先弃牌"""
        return len(self.players) == MAX_PLAYERS
