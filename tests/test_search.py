'''
Fuzzy scoring and search picker state.

'''
import pytest

from ntpeek.ui._search import (
    SearchSession,
    rank,
    score,
)


def test_subsequence_scores_and_non_matches():
    assert score('ab', 'abc') is not None
    assert score('ab', 'xaybzc') is not None
    assert score('ab', 'zzz') is None

    # order matters
    assert score('ba', 'abc') is None


def test_tighter_match_ranks_higher():
    ranked = rank('ab', ['abc', 'xaybzc', 'zzz'])
    topics = [topic for _, topic in ranked]
    assert topics == ['abc', 'xaybzc']
    assert ranked[0][0] >= ranked[1][0]


def test_front_loaded_match_wins_ratio_ties():
    assert score('arm', '/arm/bend') > score('arm', '/drive/arm')


def test_smart_case():
    assert score('arm', '/ARM/bend') is not None
    assert score('Arm', '/arm/bend') is None
    assert score('Arm', '/Arm/bend') is not None


def test_rank_is_sorted_and_stable(topics):
    candidates = sorted(topics)
    for query in ('r', 'sp', 'robot', 'ad', '/'):
        ranked = rank(query, candidates)
        scores = [s for s, _ in ranked]
        assert scores == sorted(scores, reverse=True)

        # every result is a real match
        for s, topic in ranked:
            assert s == score(query, topic) is not None

        # identical inputs, identical output
        assert rank(query, candidates) == ranked


def test_open_with_empty_query_shows_everything(topics):
    session = SearchSession(topics)
    assert session.query == ''
    assert set(session.matches) == topics
    assert len(session.matches) == len(topics)
    assert session.cursor == 0
    assert session.selected() == session.matches[0]


def test_open_empty():
    session = SearchSession()
    assert session.matches == []
    assert session.cursor is None
    assert session.selected() is None
    assert session.commit() is None

    # navigation on nothing is a no-op
    session.move_cursor(3)
    assert session.cursor is None


def test_typing_filters_and_deleting_unfilters(topics):
    session = SearchSession(topics)

    for char in 'speed':
        session.type_character(char)

    assert session.query == 'speed'
    assert set(session.matches) == {
        '/drive/left/speed',
        '/drive/right/speed',
    }
    for topic in session.matches:
        assert score('speed', topic) is not None

    for _ in 'speed':
        session.delete_character()

    assert session.query == ''
    assert set(session.matches) == topics

    # deleting from an empty query is harmless
    session.delete_character()
    assert session.query == ''


def test_no_matches_clears_cursor_and_recovers(topics):
    session = SearchSession(topics)
    session.move_cursor(2)

    session.set_query('qqqq')
    assert session.matches == []
    assert session.cursor is None
    assert session.selected() is None

    # back to some matches, cursor lands on the first
    session.set_query('robot')
    assert session.matches
    assert session.cursor == 0


def test_shrink_clamps_cursor():
    session = SearchSession(['a', 'b', 'c', 'd', 'e'])
    session.move_cursor(4)
    assert session.cursor == 4

    session.refresh(['a', 'b'])
    assert session.cursor == 1
    assert session.selected() == 'b'


def test_cursor_index_is_preserved_not_the_topic():
    session = SearchSession(['b', 'c', 'd'])
    session.move_cursor(1)
    assert session.selected() == 'c'

    # a new topic sorts in ahead of the selection
    session.refresh(['a', 'b', 'c', 'd'])
    assert session.cursor == 1
    assert session.selected() == 'b'


def test_refresh_keeps_query(topics):
    session = SearchSession(topics)
    session.set_query('arm')
    assert set(session.matches) == {'/arm/angle', '/arm/bend'}

    session.refresh(topics | {'/arm/wrist'})
    assert session.query == 'arm'
    assert '/arm/wrist' in session.matches


@pytest.mark.parametrize('offset', [1, 2, 3, 5, 7, 11, -1, -4, -9])
def test_move_cursor_round_trip(offset):
    items = ['a', 'b', 'c', 'd', 'e']
    session = SearchSession(items)
    session.move_cursor(2)
    start = session.cursor

    session.move_cursor(offset)
    assert 0 <= session.cursor < len(items)

    session.move_cursor(len(items) - offset)
    assert session.cursor == start


def test_wrap_around_both_ends():
    session = SearchSession(['a', 'b', 'c'])
    session.move_cursor(-1)
    assert session.selected() == 'c'

    session.move_cursor(1)
    assert session.selected() == 'a'

    session.move_cursor(-7)
    assert session.cursor == 2


def test_commit_has_no_side_effects(topics):
    session = SearchSession(topics)
    session.set_query('heading')
    assert session.commit() == '/robot/heading'
    assert session.query == 'heading'
    assert session.commit() == '/robot/heading'
