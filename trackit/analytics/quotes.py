"""Motivational quotes shown next to the analytics summary."""

import random
from typing import Optional

MOTIVATIONAL_QUOTES = [
    "Consistency is the key to achieving and maintaining momentum.",
    "Small habits compound into remarkable results.",
    "Progress is progress, no matter how small.",
    "The only bad workout is the one that didn't happen.",
    "Success isn't always about greatness. It's about consistency.",
    "It's not what we do once in a while that shapes our lives, but what we do consistently.",
    "Motivation is what gets you started. Habit is what keeps you going.",
    "The chains of habit are too light to be felt until they are too heavy to be broken.",
    "Excellence is not an act, but a habit.",
    "You'll never change your life until you change something you do daily.",
]


def motivational_quote(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(MOTIVATIONAL_QUOTES)
