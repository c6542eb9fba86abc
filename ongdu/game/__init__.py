# 牌桌流程控制模块
from .player import Player
from .game_state import GameState, GamePhase, GameEvent, GameConfig
from .scoring import RoundScore, MatchupResult, compare_players, score_round, find_winner
from .controller import GameController, AIStrategy
