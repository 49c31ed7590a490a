# backend/linguawise/core/statistics.py
"""
Statistics Aggregator

Derives the dashboard metrics from a user's translation history. Every
function here is a pure in-memory reduction: no network or store calls,
and the input records are never modified, so it is safe to recompute on
every request.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

from linguawise.core.language_codes import language_label
from linguawise.models import (
    LanguageCount,
    MonthlyWords,
    TranslationHistoryItem,
    UsageStatistics,
    parse_timestamp,
)

TOP_LANGUAGES = 5

# Fixed English names, independent of the process locale
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def count_words(text: Optional[str]) -> int:
    """Whitespace-delimited token count. Empty or blank text counts 0."""
    return len((text or "").split())


def rank_languages(items: Iterable[TranslationHistoryItem]) -> List[LanguageCount]:
    """
    Count target-language usage by display label.

    Sorted by count descending; equal counts are ordered by label so the
    ranking does not depend on the order of the history.
    """
    counts = Counter(language_label(item.target_lang) for item in items)
    ranked = sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))
    return [LanguageCount(name=name, count=count) for name, count in ranked]


def monthly_word_totals(items: Iterable[TranslationHistoryItem]) -> List[MonthlyWords]:
    """Words translated per calendar month, oldest month first."""
    totals: Dict[Tuple[int, int], int] = {}
    for item in items:
        moment = parse_timestamp(item.timestamp)
        if moment is None:
            continue
        key = (moment.year, moment.month)
        totals[key] = totals.get(key, 0) + count_words(item.original_text)

    return [
        MonthlyWords(name=MONTH_NAMES[month - 1], year=year, words=words)
        for (year, month), words in sorted(totals.items())
    ]


def aggregate(items: Iterable[TranslationHistoryItem]) -> UsageStatistics:
    """Compute every dashboard metric for a history collection."""
    items = list(items)
    ranking = rank_languages(items)

    return UsageStatistics(
        total_translations=len(items),
        words_translated=sum(count_words(item.original_text) for item in items),
        favorite_language=ranking[0].name if ranking else None,
        top_languages=ranking[:TOP_LANGUAGES],
        monthly_words=monthly_word_totals(items),
    )
