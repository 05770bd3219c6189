"""Spaced-repetition practice scheduler for the Blind 75 problem set."""
