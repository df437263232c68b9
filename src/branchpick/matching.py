"""Query filtering: substring hits first, then fuzzy subsequence matches."""

from __future__ import annotations

from collections.abc import Sequence

# Characters after which a match counts as starting a new word.
_WORD_BOUNDARIES = "/_-. "


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``candidate`` as a case-insensitive subsequence match of ``query``.

    Returns None when the query characters do not all appear in order.
    Consecutive runs and word-boundary hits raise the score, gaps and
    long candidates lower it.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    run = 0
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate_folded[idx - 1] in _WORD_BOUNDARIES:
            score += 35
        prev_idx = idx

    score -= len(candidate_folded) // 5
    return score


def filter_entries(
    query: str, entries: Sequence[str], limit: int | None = None
) -> list[str]:
    """Return the entries matching ``query``, best first.

    An empty query returns every entry in its original order. Ties are
    broken by entry length and then by original position, so the result
    is deterministic even with duplicate names.
    """
    if not query:
        matched = list(entries)
        return matched if limit is None else matched[: max(0, limit)]

    query_folded = query.casefold()
    substring_scored: list[tuple[int, int, int, str]] = []
    fuzzy_scored: list[tuple[int, int, int, str]] = []

    for idx, entry in enumerate(entries):
        match_idx = entry.casefold().find(query_folded)
        if match_idx >= 0:
            substring_scored.append((match_idx, len(entry), idx, entry))
            continue
        score = fuzzy_score(query, entry)
        if score is None:
            continue
        fuzzy_scored.append((-score, len(entry), idx, entry))

    substring_scored.sort()
    fuzzy_scored.sort()
    matched = [entry for *_, entry in substring_scored]
    matched.extend(entry for *_, entry in fuzzy_scored)
    if limit is not None:
        matched = matched[: max(0, limit)]
    return matched
