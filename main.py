"""翁杜 AI 对局 - 主入口"""

import argparse
import logging
import random

from ongdu.ai.optimal_ai import OptimalAI, SearchStrategy
from ongdu.game.game_state import GameConfig, GamePhase, STARTING_CASH_OPTIONS, MIN_PLAYERS, MAX_PLAYERS
from ongdu.game.controller import GameController
from ongdu.ui.renderer import TerminalRenderer


def run_game(args: argparse.Namespace) -> None:
    """运行一场完整对局（直到有人破产或达到轮数上限）"""
    delay = 0.0 if args.fast else args.delay
    renderer = TerminalRenderer(delay=delay)

    config = GameConfig(
        player_count=args.players,
        starting_cash=args.cash,
        ai_delay=(0.0, 0.0) if args.fast else (0.5, 1.5),
    )
    strategy = SearchStrategy(args.strategy)
    strategies = [OptimalAI(strategy) for _ in range(config.ai_count)]
    rng = random.Random(args.seed) if args.seed is not None else None

    gc = GameController(config, strategies=strategies, rng=rng)

    # 注册可视化回调
    gc.on_event(renderer.make_event_callback(gc.state))

    if not args.fast:
        renderer.clear()
    renderer.print_header(f"🀄 翁杜对局开始 ({config.player_count} 人, 起始资金 ${config.starting_cash})")

    state = gc.run_game(max_rounds=args.rounds)

    # 达到轮数上限时补一次结果展示
    if state.phase != GamePhase.GAME_OVER:
        renderer.show_result(state, gc.winner)


def main():
    """命令行入口"""
    parser = argparse.ArgumentParser(description="AI 翁杜对局")
    parser.add_argument("--players", type=int, default=4,
                        choices=range(MIN_PLAYERS, MAX_PLAYERS + 1), help="玩家人数 (默认4)")
    parser.add_argument("--cash", type=int, default=1000,
                        choices=STARTING_CASH_OPTIONS, help="起始资金 (默认1000)")
    parser.add_argument("--rounds", type=int, default=10, help="最多轮数 (默认10)")
    parser.add_argument("--strategy", default=SearchStrategy.OPTIMAL.value,
                        choices=[s.value for s in SearchStrategy], help="AI 摆牌策略")
    parser.add_argument("--delay", type=float, default=0.8, help="展示延迟秒数 (默认0.8)")
    parser.add_argument("--fast", action="store_true", help="快速模式 (无延迟)")
    parser.add_argument("--seed", type=int, default=None, help="随机种子 (复现对局)")
    parser.add_argument("--log-level", default="WARNING", help="日志级别 (默认WARNING)")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_game(args)


if __name__ == "__main__":
    main()
