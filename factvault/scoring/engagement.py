"""Engagement scoring for harvested facts.

Scores are integers in [1, 100]. Sources with vote/comment counts are scored
from those signals; everything else gets a jittered baseline. Callers that
need reproducible scores pass their own `random.Random`.
"""

from __future__ import annotations

import math
import random
from typing import Optional


MIN_ENGAGEMENT = 1
MAX_ENGAGEMENT = 100

SIGNAL_BASE = 85
SIGNAL_CAP = 99
UPVOTE_SCALE = 10000
COMMENT_BONUS_THRESHOLD = 500
UPVOTE_BONUS_THRESHOLD = 10000

BASELINE = 85
BASELINE_SPREAD = 10

_system_rng = random.SystemRandom()


def clamp_engagement(value: int) -> int:
    return max(MIN_ENGAGEMENT, min(MAX_ENGAGEMENT, int(value)))


def baseline_score(base: int = BASELINE, spread: int = BASELINE_SPREAD, *, rng: Optional[random.Random] = None) -> int:
    """`base` plus a uniform integer jitter in [0, spread)."""
    r = rng or _system_rng
    jitter = r.randrange(spread) if spread > 0 else 0
    return clamp_engagement(base + jitter)


def engagement_score(
    upvotes: Optional[int] = None,
    comments: Optional[int] = None,
    *,
    rng: Optional[random.Random] = None,
) -> int:
    """Map popularity signals to an engagement score.

    Both signals must be present and non-zero to use the vote formula; the
    bonuses can push past the 99 cap, so the result is re-clamped to 100.
    """
    if upvotes and comments:
        score = min(SIGNAL_CAP, math.floor(SIGNAL_BASE + (upvotes / UPVOTE_SCALE) * 15))
        if comments > COMMENT_BONUS_THRESHOLD:
            score += 2
        if upvotes > UPVOTE_BONUS_THRESHOLD:
            score += 3
        return clamp_engagement(score)
    return baseline_score(BASELINE, BASELINE_SPREAD, rng=rng)
