# 牌局引擎模块
from .card import Card, Rank, Suit, create_deck, shuffle_and_deal, sort_cards
from .hand_type import HandCategory, HandEvaluation, INVALID_EVALUATION
from .hand_evaluator import evaluate_hand, compare_hands, hand_points
from .arrangement import Arrangement, LayerName, LAYER_ORDER
from .validator import is_valid_arrangement, is_complete_for, layer_evaluations
from .special_hand import SpecialHand, detect_special_hand, has_special_hand
