"""
Fuzzy path search over cataloged files.

Matching is a case-insensitive ordered-subsequence match against the path
only; the tag is never matched. Scores reward tight, early matches:

  +10  match on the first character of the path
  +20  match right after a separator (/ \\ _ - . space)
  +20  match on a lower-to-upper camel case boundary
   +5  match adjacent to the previous match
   -5  per unmatched leading character (at most -15)
   -1  per other unmatched character

Each path is scored on its best alignment of the query, found with a
small dynamic program over the candidate positions.

A path equal to the query gets the highest score any match of that query
could reach, so it always ranks first.
"""
from typing import Iterable, List, Optional, Tuple

from .. import config
from ..models import Match, TaggedPath

FIRST_CHAR_BONUS = 10
SEPARATOR_BONUS = 20
CAMEL_CASE_BONUS = 20
ADJACENT_BONUS = 5
LEADING_PENALTY = -5
MAX_LEADING_PENALTY = -15
UNMATCHED_PENALTY = -1


class PathMatcher:
    def find(self, query: str, candidates: Iterable[TaggedPath]) -> List[Match]:
        """Returns the matching candidates, best first. Ties keep candidate order."""
        if not query:
            return []

        ceiling = self.ceiling(query)
        matches = []
        for candidate in candidates:
            scored = self.score(query, candidate.path)
            if scored is None:
                continue
            score, indexes = scored
            if candidate.path.lower() == query.lower():
                score = ceiling
            matches.append(Match(candidate, score, indexes))

        matches.sort(key=lambda m: m.score, reverse=True)
        return matches

    def score(self, query: str, target: str) -> Optional[Tuple[int, Tuple[int, ...]]]:
        """
        Scores one target. Returns None if query is not a subsequence of target.

        Every alignment of the query in the target is considered and the best
        scoring one wins, so "main" in "mapping/main.go" is scored on the
        contiguous "/main" rather than the scattered m-a-i-n of "mapping".
        On ties the earliest final index wins and contiguous steps are preferred.
        """
        # per character so indexes stay aligned with target
        q = [ch.lower() for ch in query]
        t = [ch.lower() for ch in target]
        if not q or len(q) > len(t):
            return None

        bonus = [self._position_bonus(target, ti) for ti in range(len(t))]

        # best[ti]: best score of the query prefix ending with its last char at ti
        best: List[Optional[int]] = [None] * len(t)
        for ti, ch in enumerate(t):
            if ch == q[0]:
                # leading and unmatched penalties only depend on the first index
                best[ti] = (bonus[ti]
                            + max(MAX_LEADING_PENALTY, LEADING_PENALTY * ti)
                            + UNMATCHED_PENALTY * (len(t) - len(q) - ti))

        back: List[List[Optional[int]]] = []
        for qch in q[1:]:
            prev = best
            best = [None] * len(t)
            came_from: List[Optional[int]] = [None] * len(t)
            # best of prev[0 .. ti-2], i.e. the non-adjacent predecessors
            far_score, far_index = None, None
            for ti, ch in enumerate(t):
                if ti >= 2 and prev[ti - 2] is not None and (far_score is None or prev[ti - 2] > far_score):
                    far_score, far_index = prev[ti - 2], ti - 2
                if ch != qch:
                    continue

                score, src = far_score, far_index
                if ti >= 1 and prev[ti - 1] is not None:
                    near = prev[ti - 1] + ADJACENT_BONUS
                    if score is None or near >= score:
                        score, src = near, ti - 1
                if score is None:
                    continue
                best[ti] = score + bonus[ti]
                came_from[ti] = src
            back.append(came_from)

        end = None
        for ti, score in enumerate(best):
            if score is not None and (end is None or score > best[end]):
                end = ti
        if end is None:
            return None

        indexes = [end]
        for came_from in reversed(back):
            indexes.append(came_from[indexes[-1]])
        indexes.reverse()
        return best[end], tuple(indexes)

    def _position_bonus(self, target: str, ti: int) -> int:
        if ti == 0:
            return FIRST_CHAR_BONUS
        before = target[ti - 1]
        if before in config.PATH_SEPARATORS:
            return SEPARATOR_BONUS
        if before.islower() and target[ti].isupper():
            return CAMEL_CASE_BONUS
        return 0

    def ceiling(self, query: str) -> int:
        """Upper bound of score() for any target matching query."""
        per_char = max(SEPARATOR_BONUS, CAMEL_CASE_BONUS) + ADJACENT_BONUS
        return max(FIRST_CHAR_BONUS, SEPARATOR_BONUS) + per_char * (len(query) - 1)
