"""Portal rank tiers by point total.

These values MUST match the portal's boost page tiers.
"""

from __future__ import annotations

RANK_TIERS: list[dict] = [
    {"name": "Rookie", "emoji": "\U0001f331", "min": 0, "max": 50},
    {"name": "Rising Star", "emoji": "\U0001f525", "min": 51, "max": 100},
    {"name": "Sauce Squad", "emoji": "⚡", "min": 101, "max": 150},
    {"name": "VIP", "emoji": "\U0001f451", "min": 151, "max": 200},
    {"name": "Legend", "emoji": "\U0001f3c6", "min": 201, "max": None},
]


def compute_rank(points: int) -> dict:
    """Compute rank info from a point total.

    Totals below zero are treated as Rookie. The top tier has no upper bound,
    so next_name and points_to_next are None there.
    """
    index = 0
    for i, tier in enumerate(RANK_TIERS):
        if points >= tier["min"]:
            index = i

    current = RANK_TIERS[index]
    next_tier = RANK_TIERS[index + 1] if index + 1 < len(RANK_TIERS) else None

    return {
        "name": current["name"],
        "emoji": current["emoji"],
        "min": current["min"],
        "max": current["max"],
        "next_name": next_tier["name"] if next_tier else None,
        "points_to_next": next_tier["min"] - points if next_tier else None,
    }
