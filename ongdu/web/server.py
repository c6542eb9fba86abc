"""WebSocket 观战服务 - 驱动全 AI 对局并实时推送事件到前端"""

import asyncio
import json
import logging
import os
import random
from typing import Optional, Set, Tuple

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from ongdu.engine.card import Card
from ongdu.engine.arrangement import Arrangement, LAYER_ORDER
from ongdu.engine.hand_type import HandEvaluation
from ongdu.engine.hand_evaluator import evaluate_hand
from ongdu.engine.special_hand import detect_special_hand
from ongdu.engine.validator import is_valid_arrangement
from ongdu.game.player import Player
from ongdu.game.game_state import GameConfig, GamePhase
from ongdu.game.scoring import RoundScore, should_game_end
from ongdu.game.controller import GameController

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 10


# ============================================================
#  配置（环境变量）
# ============================================================

def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"环境变量 {name} 必须是整数: {raw!r}") from None


def load_config() -> Tuple[GameConfig, int]:
    """从 ONGDU_PLAYERS / ONGDU_CASH / ONGDU_MAX_ROUNDS 读取观战对局配置"""
    config = GameConfig(
        player_count=_env_int("ONGDU_PLAYERS", 4),
        starting_cash=_env_int("ONGDU_CASH", 1000),
        ai_delay=(0.0, 0.0),    # 停顿由异步思考倒计时负责
    )
    max_rounds = _env_int("ONGDU_MAX_ROUNDS", DEFAULT_MAX_ROUNDS)
    if max_rounds <= 0:
        raise ValueError(f"ONGDU_MAX_ROUNDS 必须为正: {max_rounds}")
    return config, max_rounds


# ============================================================
#  序列化工具
# ============================================================

def card_to_dict(c: Optional[Card]) -> Optional[dict]:
    """将 Card 序列化为前端可用的 dict（空位为 None）"""
    if c is None:
        return None
    return {
        "id": c.id,
        "rank": int(c.rank),
        "suit": c.suit.value,
        "display": c.display,
        "is_wild": c.is_wild,
    }


def evaluation_to_dict(ev: HandEvaluation) -> dict:
    return {
        "category": int(ev.category),
        "name": ev.name,
        "value": ev.value,
        "same_suit": ev.same_suit,
        "description": ev.description,
        "points": ev.win_points,
    }


def arrangement_to_dict(arrangement: Optional[Arrangement]) -> Optional[dict]:
    """三道摆牌连同每道评估、合法性与特殊牌一起序列化"""
    if arrangement is None:
        return None
    special = detect_special_hand(arrangement)
    return {
        "layers": {
            name.value: {
                "cards": [card_to_dict(c) for c in arrangement.layer(name)],
                "evaluation": evaluation_to_dict(evaluate_hand(arrangement.layer(name))),
            }
            for name in LAYER_ORDER
        },
        "valid": is_valid_arrangement(arrangement),
        "special": special.value if special else None,
    }


def player_to_dict(p: Player, reveal: bool = False) -> dict:
    """将 Player 序列化；reveal 为 True 时附带摆牌"""
    d = {
        "id": p.id,
        "name": p.name,
        "cash": p.cash,
        "hand_size": p.hand_size,
        "hand": [card_to_dict(c) for c in p.hand],
        "is_ready": p.is_ready,
        "is_bankrupt": p.is_bankrupt,
    }
    if reveal:
        d["arrangement"] = arrangement_to_dict(p.arrangement)
    return d


def round_score_to_dict(s: RoundScore) -> dict:
    return {
        "player_id": s.player_id,
        "player_name": s.player_name,
        "points_against": dict(s.points_against),
        "total_points": s.total_points,
        "cash_change": s.cash_change,
    }


# ============================================================
#  FastAPI 应用
# ============================================================

app = FastAPI(title="翁杜 AI 观战")

# WebSocket 连接池
connections: Set[WebSocket] = set()


async def broadcast(msg: dict) -> None:
    """向所有连接的客户端广播消息"""
    data = json.dumps(msg, ensure_ascii=False)
    dead = set()
    for ws in connections:
        try:
            await ws.send_text(data)
        except (WebSocketDisconnect, RuntimeError):
            dead.add(ws)
    connections.difference_update(dead)


def get_thinking_seconds(phase: str) -> int:
    """获取思考时间（秒），带随机波动模拟真实感"""
    if phase == "discard":
        return random.randint(2, 3)
    return random.randint(1, 3)


async def broadcast_thinking(player_id: str, phase: str, seconds: int) -> None:
    """广播 AI 思考倒计时：先发 thinking 开始，然后逐秒倒计时"""
    await broadcast({
        "type": "thinking",
        "player_id": player_id,
        "phase": phase,
        "total": seconds,
        "remaining": seconds,
    })
    for i in range(seconds, 0, -1):
        await asyncio.sleep(1.0)
        await broadcast({
            "type": "countdown",
            "player_id": player_id,
            "remaining": i - 1,
        })


@app.get("/")
async def index():
    """服务状态"""
    config, max_rounds = load_config()
    return {
        "name": "ongdu",
        "status": "ok",
        "spectators": len(connections),
        "players": config.player_count,
        "starting_cash": config.starting_cash,
        "max_rounds": max_rounds,
    }


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    """WebSocket 端点：客户端连接后等待 start 指令"""
    await ws.accept()
    connections.add(ws)
    try:
        while True:
            data = await ws.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                logger.warning("忽略无法解析的消息: %r", data[:200])
                continue
            if not isinstance(msg, dict):
                logger.warning("忽略非对象消息: %r", data[:200])
                continue
            if msg.get("action") == "start":
                await run_game_async()
    except (WebSocketDisconnect, RuntimeError):
        pass
    finally:
        connections.discard(ws)


# ============================================================
#  异步对局驱动
# ============================================================

async def run_game_async() -> None:
    """异步驱动一场全 AI 对局，每步实时推送事件到前端"""
    config, max_rounds = load_config()
    gc = GameController(config, sleep=lambda _: None)
    logger.info("观战对局开始: %d 人, 最多 %d 轮", config.player_count, max_rounds)
    gc.start_game()

    await broadcast({
        "type": "game_start",
        "players": [{"id": p.id, "name": p.name, "cash": p.cash} for p in gc.players],
        "max_rounds": max_rounds,
    })

    for played in range(1, max_rounds + 1):
        await run_round_async(gc)
        if played == max_rounds and not should_game_end(gc.players):
            break
        if not gc.next_round():
            break

    winner = gc.winner
    await broadcast({
        "type": "result",
        "rounds": gc.state.current_round,
        "winner_id": winner.id if winner else None,
        "winner_name": winner.name if winner else None,
        "players": [player_to_dict(p) for p in gc.players],
    })


async def run_round_async(gc: GameController) -> None:
    """逐步执行一轮：发牌 → 弃牌 → 逐个摆牌 → 亮牌 → 结算"""
    s = gc.state
    await broadcast({
        "type": "deal",
        "round": s.current_round,
        "starting_player_id": s.starting_player.id,
        "players": [player_to_dict(p) for p in gc.players],
    })
    await asyncio.sleep(1.0)

    if s.phase == GamePhase.DISCARD:
        discarder = s.starting_player
        await broadcast_thinking(discarder.id, "discard", get_thinking_seconds("discard"))
        gc.run_discard()
        await broadcast({
            "type": "discard",
            "player_id": discarder.id,
            "card": card_to_dict(s.discard_pile[-1]),
            "hand": [card_to_dict(c) for c in discarder.hand],
        })
        await asyncio.sleep(0.5)

    for player in gc.pending_ai_players():
        await broadcast_thinking(player.id, "arrange", get_thinking_seconds("arrange"))
        gc.arrange_ai_player(player)
        await broadcast({"type": "arranged", "player_id": player.id})
        await asyncio.sleep(0.3)

    gc.reveal()
    await broadcast({
        "type": "reveal",
        "players": [player_to_dict(p, reveal=True) for p in gc.players],
    })
    await asyncio.sleep(1.5)

    scores = gc.run_scoring()
    await broadcast({
        "type": "scores",
        "round": s.current_round,
        "scores": [round_score_to_dict(sc) for sc in scores],
        "players": [player_to_dict(p) for p in gc.players],
    })
    await asyncio.sleep(1.5)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
