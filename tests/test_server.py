"""观战服务单元测试 - 序列化、环境变量配置与状态接口"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from ongdu.engine.card import Card, Rank, Suit
from ongdu.engine.arrangement import Arrangement
from ongdu.game.player import Player
from ongdu.game.scoring import RoundScore
from ongdu.web import server
from ongdu.web.server import (
    app, card_to_dict, arrangement_to_dict, player_to_dict, round_score_to_dict, load_config,
)


def c(rank: Rank, suit: Suit = Suit.SPADE) -> Card:
    return Card.standard(rank, suit)


def triple(rank: Rank):
    return [c(rank, Suit.SPADE), c(rank, Suit.HEART), c(rank, Suit.DIAMOND)]


ARRANGEMENT = Arrangement.from_groups(
    [c(Rank.TWO, Suit.SPADE), c(Rank.THREE, Suit.HEART), c(Rank.FIVE, Suit.DIAMOND)],
    [c(Rank.JACK, Suit.SPADE), c(Rank.JACK, Suit.HEART), c(Rank.QUEEN, Suit.DIAMOND)],
    triple(Rank.SEVEN),
)


class TestSerialization:

    def test_card(self):
        assert card_to_dict(c(Rank.TEN, Suit.HEART)) == {
            "id": "10-hearts", "rank": 10, "suit": "♥", "display": "♥10", "is_wild": False,
        }
        assert card_to_dict(Card.wild(3))["is_wild"] is True
        assert card_to_dict(None) is None

    def test_arrangement(self):
        d = arrangement_to_dict(ARRANGEMENT)
        assert d["valid"] is True
        assert d["special"] is None
        assert set(d["layers"]) == {"top", "middle", "bottom"}
        assert d["layers"]["bottom"]["evaluation"]["points"] == 5
        assert d["layers"]["middle"]["evaluation"]["value"] == 34
        assert len(d["layers"]["top"]["cards"]) == 3

    def test_partial_arrangement(self):
        d = arrangement_to_dict(Arrangement.empty())
        assert d["valid"] is False
        assert d["layers"]["top"]["cards"] == [None, None, None]
        assert arrangement_to_dict(None) is None

    def test_player(self):
        p = Player(id="ai-0", name="Dragon", cash=900, arrangement=ARRANGEMENT)
        p.hand = ARRANGEMENT.all_cards()
        d = player_to_dict(p)
        assert d["hand_size"] == 9
        assert "arrangement" not in d
        assert player_to_dict(p, reveal=True)["arrangement"]["valid"] is True

    def test_round_score(self):
        s = RoundScore("ai-0", "Dragon", {"ai-1": 4}, 4, 4)
        assert round_score_to_dict(s)["points_against"] == {"ai-1": 4}


class TestConfig:

    def test_defaults(self, monkeypatch):
        for name in ("ONGDU_PLAYERS", "ONGDU_CASH", "ONGDU_MAX_ROUNDS"):
            monkeypatch.delenv(name, raising=False)
        config, rounds = load_config()
        assert config.player_count == 4
        assert config.starting_cash == 1000
        assert rounds == server.DEFAULT_MAX_ROUNDS

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ONGDU_PLAYERS", "6")
        monkeypatch.setenv("ONGDU_CASH", "500")
        monkeypatch.setenv("ONGDU_MAX_ROUNDS", "3")
        config, rounds = load_config()
        assert config.player_count == 6
        assert config.starting_cash == 500
        assert rounds == 3

    def test_bad_env(self, monkeypatch):
        monkeypatch.setenv("ONGDU_PLAYERS", "many")
        with pytest.raises(ValueError):
            load_config()

    def test_out_of_range(self, monkeypatch):
        monkeypatch.setenv("ONGDU_PLAYERS", "9")
        with pytest.raises(ValueError):
            load_config()


class TestApp:

    def test_status(self, monkeypatch):
        monkeypatch.setenv("ONGDU_PLAYERS", "3")
        client = TestClient(app)
        resp = client.get("/")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["players"] == 3

    def test_spectator_game_stream(self, monkeypatch):
        monkeypatch.setenv("ONGDU_PLAYERS", "2")
        monkeypatch.setenv("ONGDU_MAX_ROUNDS", "1")
        sent = []

        async def fake_broadcast(msg):
            sent.append(msg)

        async def no_thinking(player_id, phase, seconds):
            return None

        monkeypatch.setattr(server, "broadcast", fake_broadcast)
        monkeypatch.setattr(server, "broadcast_thinking", no_thinking)
        asyncio.run(server.run_game_async())

        types = [m["type"] for m in sent]
        assert types[0] == "game_start"
        assert types[1] == "deal"
        assert types.count("arranged") == 2
        assert "reveal" in types and "scores" in types
        assert types[-1] == "result"
        scores = next(m for m in sent if m["type"] == "scores")["scores"]
        assert sum(s["total_points"] for s in scores) == 0

    def test_malformed_frames_ignored(self, monkeypatch):
        async def fake_game():
            await server.broadcast({"type": "ok"})

        monkeypatch.setattr(server, "run_game_async", fake_game)
        client = TestClient(app)
        with client.websocket_connect("/ws") as ws:
            ws.send_text("not json")
            ws.send_text("[1, 2]")
            ws.send_json({"action": "start"})
            assert ws.receive_json() == {"type": "ok"}
