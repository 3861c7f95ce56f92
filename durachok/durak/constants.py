"""Durak-specific constants."""

# Cards each player holds after the deal and after every refill
HAND_SIZE = 6

# Attacks the table top can hold in one round
MAX_TABLE_CARDS = 6

MIN_PLAYERS = 1
MAX_PLAYERS = 8

DECK_SIZE = 52

# First-player policy names accepted by DurakRules
LOWEST_TRUMP = "lowest_trump"
FIRST_SEAT = "first_seat"
