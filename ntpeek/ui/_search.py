# ntpeek: live topic browsing for hackers
# Copyright (C) 2024-present  ntpeek contributors

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.

# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Incremental fuzzy topic search using ``fuzzywuzzy``.

"""
from __future__ import annotations
from typing import (
    Iterable,
    Optional,
)

from fuzzywuzzy import fuzz

from ..log import get_logger

log = get_logger(__name__)

# fuzz ratios are in [0, 100]; each ratio point outweighs any
# start-offset penalty so the offset only breaks ratio ties.
_ratio_scale: int = 100


def _first_match_index(
    query: str,
    candidate: str,

) -> Optional[int]:
    '''
    Return the index in ``candidate`` where the left-most subsequence
    match of ``query`` starts, or ``None`` if there is no match.

    '''
    start: Optional[int] = None
    i: int = 0
    for char in query:
        i = candidate.find(char, i)
        if i < 0:
            return None

        if start is None:
            start = i

        i += 1

    return start


def score(
    query: str,
    candidate: str,

) -> Optional[int]:
    '''
    Score ``candidate`` against ``query``, higher is better.

    ``None`` is returned unless every char of ``query`` shows up in
    ``candidate`` in order. Matching is "smart case": case
    insensitive unless the query has an upper case char in it.

    '''
    if not query:
        return 0

    if not any(c.isupper() for c in query):
        query = query.lower()
        candidate = candidate.lower()

    start = _first_match_index(query, candidate)
    if start is None:
        return None

    ratio: int = fuzz.partial_ratio(query, candidate)
    return ratio * _ratio_scale - min(start, _ratio_scale - 1)


def rank(
    query: str,
    candidates: Iterable[str],

) -> list[tuple[int, str]]:
    '''
    Return ``(score, candidate)`` pairs for all matches, best first.

    Equal scores keep the order in which ``candidates`` was iterated.

    '''
    matches: list[tuple[int, str]] = []
    for candidate in candidates:
        s = score(query, candidate)
        if s is not None:
            matches.append((s, candidate))

    # NOTE: ``sorted()`` is stable, also with ``reverse=True``
    return sorted(
        matches,
        key=lambda match: match[0],
        reverse=True,
    )


class SearchSession:
    '''
    Query, ranked results and selection cursor for one opening of the
    topic picker.

    The cursor is an index into ``.matches`` and is kept valid across
    every recompute: cleared when there are no matches, clamped to the
    last match when the list shrinks past it and otherwise left as is
    (even if a different topic now sits at that index).

    '''
    def __init__(
        self,
        candidates: Iterable[str] = (),
    ) -> None:
        self.query: str = ''
        self.matches: list[str] = []
        self.cursor: Optional[int] = None
        self._candidates: list[str] = []
        self.open(candidates)

    def open(
        self,
        candidates: Iterable[str],
    ) -> None:
        self.query = ''
        self._candidates = sorted(candidates)
        self.matches = list(self._candidates)
        self.cursor = 0 if self.matches else None

    def _update_matches(self) -> None:
        if not self.query:
            # no filter, show everything
            self.matches = list(self._candidates)
        else:
            self.matches = [
                topic for _, topic in rank(self.query, self._candidates)
            ]

        # reset selection or adjust if out of bounds
        if not self.matches:
            self.cursor = None

        elif self.cursor is None:
            self.cursor = 0

        elif self.cursor >= len(self.matches):
            self.cursor = len(self.matches) - 1

    def set_query(self, text: str) -> None:
        self.query = text
        self._update_matches()
        log.debug(f'{len(self.matches)} matches for {text!r}')

    def type_character(self, char: str) -> None:
        self.set_query(self.query + char)

    def delete_character(self) -> None:
        self.set_query(self.query[:-1])

    def refresh(
        self,
        candidates: Iterable[str],
    ) -> None:
        '''
        Re-run the current query against a new candidate snapshot.

        '''
        self._candidates = sorted(candidates)
        self._update_matches()

    def move_cursor(self, offset: int) -> None:
        '''
        Move the selection by ``offset`` wrapping around either end.

        '''
        if not self.matches:
            return

        current = self.cursor or 0
        self.cursor = (current + offset) % len(self.matches)

    def selected(self) -> Optional[str]:
        if (
            self.cursor is None
            or self.cursor >= len(self.matches)
        ):
            return None

        return self.matches[self.cursor]

    def commit(self) -> Optional[str]:
        '''
        Return the selected topic, if any; closing the session is
        up to the caller.

        '''
        return self.selected()
