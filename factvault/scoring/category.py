"""Keyword-based topical classification for facts.

Deterministic by construction: each category scores one point per keyword that
appears anywhere in the lowercased text (substring match, repeats ignored), the
strictly highest score wins, and ties go to whichever category comes first in
CATEGORY_KEYWORDS. No match at all means "mixed".
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from factvault.ingestion.fact_types import FALLBACK_CATEGORY


# Order matters: it is the tie-break order.
CATEGORY_KEYWORDS: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("science", ("scientist", "discovered", "study", "research", "laboratory", "experiment", "physics", "chemistry", "biology")),
    ("history", ("ancient", "century", "year", "historical", "war", "king", "queen", "empire", "civilization")),
    ("tech", ("computer", "technology", "software", "hardware", "digital", "internet", "app", "device", "code")),
    ("space", ("planet", "star", "galaxy", "astronaut", "nasa", "space", "orbit", "moon", "asteroid", "cosmic")),
    ("psychology", ("brain", "behavior", "mental", "psychology", "cognitive", "emotion", "memory", "mind")),
    ("nature", ("animal", "plant", "species", "wildlife", "ocean", "forest", "ecosystem", "environment")),
    ("art", ("museum", "painting", "artist", "music", "culture", "literature", "book", "movie", "film")),
    ("food", ("food", "recipe", "cuisine", "ingredient", "dish", "taste", "flavor", "restaurant", "chef")),
)


def category_scores(text: Optional[str]) -> List[Tuple[str, int]]:
    blob = (text or "").lower()
    scores = []
    for category, keywords in CATEGORY_KEYWORDS:
        hits = 0
        for kw in keywords:
            if kw in blob:
                hits += 1
        scores.append((category, hits))
    return scores


def classify_text(text: Optional[str]) -> str:
    best_category = FALLBACK_CATEGORY
    best_score = 0
    for category, score in category_scores(text):
        # strict > keeps the earlier category on ties
        if score > best_score:
            best_category = category
            best_score = score
    return best_category
