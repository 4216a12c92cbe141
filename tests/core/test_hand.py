"""Tests for hand valuation."""

from hypothesis import given
from hypothesis import strategies as st

from parlor.cards import Card, Rank, Suit
from parlor.hand import Hand, hand_value, is_blackjack, is_soft
from tests.conftest import card_strategy, make_hand

cards = card_strategy()


class TestHandValue:
    """Tests for hand value calculation."""

    def test_empty_hand(self, empty_hand):
        assert empty_hand.value == 0
        assert not empty_hand.is_soft
        assert not empty_hand.is_blackjack
        assert empty_hand.upcard is None

    def test_simple_hand(self):
        assert make_hand("5S", "7H").value == 12

    def test_face_cards(self):
        assert make_hand("KS", "QH").value == 20

    def test_ace_as_eleven(self, soft_17_hand):
        assert soft_17_hand.value == 17
        assert soft_17_hand.is_soft

    def test_ace_reduced_when_busting(self):
        """Ace drops to 1 when 11 would bust."""
        hand = make_hand("AS", "6H", "KC")
        assert hand.value == 17
        assert not hand.is_soft

    def test_two_aces(self):
        hand = make_hand("AS", "AH")
        assert hand.value == 12
        assert hand.is_soft

    def test_multiple_aces(self):
        assert make_hand("AS", "AH", "AD", "8C").value == 21
        assert make_hand("AS", "AH", "AD", "AC").value == 14
        assert make_hand("AS", "AH", "9D", "KC").value == 21

    def test_hard_hand(self, hard_16_hand):
        assert hard_16_hand.value == 16
        assert not hard_16_hand.is_soft

    def test_busted(self, bust_hand):
        assert bust_hand.value == 26
        assert bust_hand.is_busted


class TestBlackjack:
    """Tests for natural detection."""

    def test_natural(self, blackjack_hand):
        assert blackjack_hand.is_blackjack
        assert blackjack_hand.value == 21

    def test_three_card_21_is_not_natural(self):
        hand = make_hand("7S", "7H", "7D")
        assert hand.value == 21
        assert not hand.is_blackjack

    def test_module_functions_match_hand(self, blackjack_hand):
        assert is_blackjack(blackjack_hand.cards)
        assert hand_value(blackjack_hand.cards) == 21
        assert is_soft(blackjack_hand.cards)


class TestHandOperations:
    """Tests for adding and removing cards."""

    def test_add_card(self, empty_hand):
        empty_hand.add_card(Card(Rank.NINE, Suit.CLUBS))
        assert len(empty_hand) == 1
        assert empty_hand.upcard == Card(Rank.NINE, Suit.CLUBS)

    def test_remove_last(self):
        hand = make_hand("2S", "3S")
        assert hand.remove_last() == Card(Rank.THREE, Suit.SPADES)
        assert hand.value == 2

    def test_remove_last_empty(self, empty_hand):
        assert empty_hand.remove_last() is None

    def test_clear_returns_cards(self, blackjack_hand):
        removed = blackjack_hand.clear()
        assert removed == [Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)]
        assert len(blackjack_hand) == 0

    def test_str(self):
        assert str(make_hand("AS", "KH")) == "A of Spades, K of Hearts"


@given(st.lists(cards, max_size=12), st.randoms(use_true_random=False))
def test_value_ignores_order(hand_cards, random):
    shuffled = list(hand_cards)
    random.shuffle(shuffled)
    assert hand_value(shuffled) == hand_value(hand_cards)


@given(st.lists(cards, min_size=1, max_size=12))
def test_value_bounds(hand_cards):
    """Soft totals never exceed 21 and every ace counts at least 1."""
    value = hand_value(hand_cards)
    hard = sum(1 if c.is_ace else c.value for c in hand_cards)
    assert value >= hard
    if is_soft(hand_cards):
        assert value <= 21
        assert value == hard + 10
    else:
        assert value == hard


@given(st.lists(cards, max_size=12))
def test_hand_matches_function(hand_cards):
    assert Hand(list(hand_cards)).value == hand_value(hand_cards)
