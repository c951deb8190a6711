from __future__ import annotations

from collections import Counter
from typing import List, Optional

from talentlens import config
from talentlens.core.text_processing import normalize
from talentlens.models import SkillTag


def extract_keywords(text: Optional[str], max_count: int = 5) -> List[str]:
    """
    Frequency-ranked salient terms from a free-text hiring narrative.

    Counter preserves insertion order and most_common() sorts stably, so
    equal counts keep first-occurrence order.
    """
    if max_count <= 0:
        return []
    counts = Counter(normalize(text))
    return [word for word, _ in counts.most_common(max_count)]


def context_skill_tags(text: Optional[str], max_count: Optional[int] = None) -> List[SkillTag]:
    """Keywords wrapped as pseudo-skill tags so they can ride the skills filter."""
    limit = config.CONTEXT_KEYWORD_LIMIT if max_count is None else max_count
    return [
        SkillTag(id=f"context-{kw}", label=kw, category="context")
        for kw in extract_keywords(text, limit)
    ]
