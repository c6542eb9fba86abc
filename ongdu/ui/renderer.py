"""终端可视化渲染器 - 在终端中展示翁杜对局过程"""

import os
import time
from typing import List, Optional

from ongdu.engine.card import Card, Suit
from ongdu.engine.arrangement import Arrangement, LAYER_ORDER, LayerName
from ongdu.engine.hand_evaluator import evaluate_hand
from ongdu.engine.special_hand import detect_special_hand, SPECIAL_HAND_NAME
from ongdu.engine.validator import is_valid_arrangement
from ongdu.game.player import Player
from ongdu.game.game_state import GameState, GamePhase, GameEvent
from ongdu.game.scoring import RoundScore


# 颜色常量 (ANSI)
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
MAGENTA = "\033[95m"
CYAN = "\033[96m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"

LAYER_LABEL = {
    LayerName.TOP: "头道",
    LayerName.MIDDLE: "中道",
    LayerName.BOTTOM: "尾道",
}


class TerminalRenderer:
    """终端可视化渲染器"""

    def __init__(self, delay: float = 0.8):
        self.delay = delay  # 每步之间的延迟（秒）

    def clear(self) -> None:
        """清屏"""
        os.system("clear" if os.name != "nt" else "cls")

    def pause(self, seconds: float = 0) -> None:
        """暂停（delay 为 0 时不停）"""
        if self.delay <= 0:
            return
        time.sleep(seconds or self.delay)

    # ============================================================
    #  牌面渲染
    # ============================================================

    @staticmethod
    def format_card(card: Optional[Card]) -> str:
        if card is None:
            return f"{DIM}--{RESET}"
        if card.suit == Suit.WILD:
            return f"{CYAN}{BOLD}{card.display}{RESET}"
        if card.suit in (Suit.HEART, Suit.DIAMOND):
            return f"{RED}{card.display}{RESET}"
        return card.display

    @classmethod
    def format_cards(cls, cards) -> str:
        """将牌列表格式化为彩色字符串"""
        return " ".join(cls.format_card(c) for c in cards)

    @staticmethod
    def format_player_name(player: Player) -> str:
        """格式化玩家名（真人 / 破产带标记）"""
        tag = " [你]" if player.is_human else ""
        if player.is_bankrupt:
            return f"{DIM}{player.name}{tag} [破产]{RESET}"
        color = GREEN if player.is_human else MAGENTA
        return f"{color}{BOLD}{player.name}{tag}{RESET}"

    @staticmethod
    def format_cash(amount: int, signed: bool = False) -> str:
        if signed:
            color = GREEN if amount > 0 else RED if amount < 0 else DIM
            return f"{color}{amount:+d}{RESET}"
        return f"${amount}"

    def print_header(self, title: str) -> None:
        """打印带框的标题"""
        print(f"\n{YELLOW}{BOLD}{'═' * 60}{RESET}")
        print(f"{YELLOW}{BOLD}  {title}{RESET}")
        print(f"{YELLOW}{BOLD}{'═' * 60}{RESET}\n")

    # ============================================================
    #  发牌与弃牌
    # ============================================================

    def show_deal(self, state: GameState) -> None:
        """展示发牌结果"""
        self.print_header(f"🃏 第 {state.current_round} 轮发牌")
        for i, p in enumerate(state.players):
            marker = " ★首家" if i == state.starting_player_index else ""
            print(f"  {self.format_player_name(p)}{marker} ({p.hand_size}张, "
                  f"{self.format_cash(p.cash)}): {self.format_cards(p.hand)}")
        print()

    def show_discard(self, player: Player, card: Card) -> None:
        print(f"  {self.format_player_name(player)} 弃牌: {self.format_card(card)}")

    # ============================================================
    #  摆牌展示
    # ============================================================

    def show_arrangement(self, player: Player, arrangement: Optional[Arrangement]) -> None:
        """展示一位玩家的三道摆牌"""
        name = self.format_player_name(player)
        if arrangement is None:
            print(f"  {name}: {RED}未摆牌（犯规）{RESET}")
            return

        special = detect_special_hand(arrangement)
        if special is not None:
            tag = f" {YELLOW}{BOLD}★ {SPECIAL_HAND_NAME[special]}{RESET}"
        elif not is_valid_arrangement(arrangement):
            tag = f" {RED}犯规{RESET}"
        else:
            tag = ""
        print(f"  {name}{tag}")

        for layer in reversed(LAYER_ORDER):
            cards = arrangement.layer(layer)
            ev = evaluate_hand(cards)
            print(f"    {LAYER_LABEL[layer]}: {self.format_cards(cards)}  "
                  f"{DIM}{ev.name} · {ev.description}{RESET}")

    def show_reveal(self, players: List[Player]) -> None:
        self.print_header("🎴 亮牌")
        for p in players:
            if not p.is_bankrupt:
                self.show_arrangement(p, p.arrangement)
        print()

    # ============================================================
    #  结算
    # ============================================================

    def show_scores(self, players: List[Player], scores: List[RoundScore]) -> None:
        """展示本轮结算"""
        self.print_header("💰 本轮结算")
        names = {p.id: p.name for p in players}
        cash = {p.id: p.cash for p in players}
        print(f"  {'玩家':<12} {'净分':>6} {'资金':>8}")
        print(f"  {'─' * 40}")
        for s in scores:
            print(f"  {s.player_name:<10} {self.format_cash(s.cash_change, signed=True):>15} "
                  f"{self.format_cash(cash.get(s.player_id, 0)):>8}")
            details = ", ".join(
                f"{names.get(oid, oid)} {pts:+d}" for oid, pts in s.points_against.items()
            )
            if details:
                print(f"    {DIM}{details}{RESET}")
        print()

    def show_result(self, state: GameState, winner: Optional[Player]) -> None:
        """展示游戏结果"""
        self.print_header("🏆 游戏结束")
        if winner is None:
            print("  无人幸存")
        else:
            print(f"  胜者: {self.format_player_name(winner)} ({self.format_cash(winner.cash)})")
        print(f"  共进行 {state.current_round} 轮\n")
        for p in sorted(state.players, key=lambda p: p.cash, reverse=True):
            print(f"  {self.format_player_name(p):<30} {self.format_cash(p.cash)}")
        print()

    # ============================================================
    #  事件回调（注册到 GameController）
    # ============================================================

    def make_event_callback(self, state: GameState):
        """创建事件回调函数，供 GameController.on_event() 使用"""
        renderer = self

        def find(pid: Optional[str]) -> Optional[Player]:
            return next((p for p in state.players if p.id == pid), None)

        def callback(event: GameEvent) -> None:
            if event.phase == GamePhase.DEALING:
                renderer.show_deal(state)
                renderer.pause()
            elif event.phase == GamePhase.DISCARD:
                renderer.show_discard(find(event.player_id), event.data)
                renderer.pause(0.5)
            elif event.phase == GamePhase.ARRANGEMENT:
                print(f"  {renderer.format_player_name(find(event.player_id))} 已确认摆牌")
            elif event.phase == GamePhase.REVEAL:
                renderer.show_reveal(state.players)
                renderer.pause()
            elif event.phase == GamePhase.SCORING:
                renderer.show_scores(state.players, event.data)
                renderer.pause()
            elif event.phase == GamePhase.GAME_OVER:
                renderer.show_result(state, event.data)

        return callback
