"""牌与发牌单元测试"""

import random

import pytest
from ongdu.engine.card import (
    Card, Rank, Suit, create_deck, shuffle_and_deal, sort_cards, hand_size_for, DECK_SIZE,
)


class TestCard:

    def test_standard_id(self):
        assert Card.standard(Rank.TEN, Suit.HEART).id == "10-hearts"
        assert Card.standard(Rank.ACE, Suit.SPADE).id == "A-spades"

    def test_wild_card(self):
        w = Card.wild(2)
        assert w.id == "wild-2"
        assert w.is_wild
        assert w.comparison_value == 0
        assert w.scoring_value == 0

    def test_values(self):
        ace = Card.standard(Rank.ACE, Suit.CLUB)
        king = Card.standard(Rank.KING, Suit.CLUB)
        assert ace.comparison_value == 14
        assert ace.scoring_value == 1
        assert king.comparison_value == 13
        assert king.scoring_value == 10
        assert king.is_face and not ace.is_face

    def test_wild_flag_mismatch_raises(self):
        with pytest.raises(ValueError):
            Card(id="bad", rank=Rank.WILD, suit=Suit.WILD, is_wild=False)
        with pytest.raises(ValueError):
            Card(id="bad", rank=Rank.TWO, suit=Suit.SPADE, is_wild=True)

    def test_sort_puts_wilds_first(self):
        cards = [Card.standard(Rank.ACE, Suit.SPADE), Card.wild(1), Card.standard(Rank.TWO, Suit.HEART)]
        ranks = [c.rank for c in sort_cards(cards)]
        assert ranks == [Rank.WILD, Rank.TWO, Rank.ACE]

    def test_ordering_by_rank(self):
        two = Card.standard(Rank.TWO, Suit.CLUB)
        ace = Card.standard(Rank.ACE, Suit.SPADE)
        assert two < ace
        assert not ace < two
        assert Card.wild(2) < two
        assert min([ace, two, Card.wild(1)]).is_wild


class TestDeck:

    def test_deck_composition(self):
        deck = create_deck()
        assert len(deck) == DECK_SIZE == 55
        assert len({c.id for c in deck}) == 55
        assert sum(1 for c in deck if c.is_wild) == 3
        for suit in (Suit.SPADE, Suit.HEART, Suit.DIAMOND, Suit.CLUB):
            assert sum(1 for c in deck if c.suit == suit) == 13

    def test_hand_size_for(self):
        assert hand_size_for(6, 2, 2) == 10
        assert hand_size_for(6, 1, 2) == 9
        assert hand_size_for(5, 0, 0) == 9

    def test_deal_four_players(self):
        hands, remaining = shuffle_and_deal(create_deck(), 4, rng=random.Random(1))
        assert [len(h) for h in hands] == [9, 9, 9, 9]
        assert len(remaining) == 55 - 36

    def test_deal_six_players_uses_whole_deck(self):
        hands, remaining = shuffle_and_deal(create_deck(), 6, starting_index=2, rng=random.Random(3))
        assert [len(h) for h in hands] == [9, 9, 10, 9, 9, 9]
        assert remaining == []
        dealt = [c.id for h in hands for c in h]
        assert len(set(dealt)) == 55

    def test_deal_does_not_mutate_deck(self):
        deck = create_deck()
        ids = [c.id for c in deck]
        shuffle_and_deal(deck, 3, rng=random.Random(5))
        assert [c.id for c in deck] == ids

    def test_deal_too_many_players(self):
        with pytest.raises(ValueError):
            shuffle_and_deal(create_deck()[:20], 3)
