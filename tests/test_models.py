"""
Unit tests for the data models.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tournament.models import (
    SCORE_SENTINEL,
    GroupResult,
    KnockoutMatch,
    Match,
    PlayoffsResult,
    QualifiedTeam,
    SheetRole,
    Standing,
    TournamentModel,
    Workbook,
    is_score,
)


class TestMatch:
    """Tests for the Match model."""

    def test_match_defaults_to_unplayed(self):
        """A match without scores carries the sentinel and is not played."""
        match = Match(home='Lions', away='Tigers')
        assert match.home_score == SCORE_SENTINEL
        assert match.away_score == SCORE_SENTINEL
        assert match.location == ''
        assert not match.is_played

    def test_match_with_scores_is_played(self):
        match = Match(home='Lions', away='Tigers', home_score=2, away_score=0)
        assert match.is_played

    def test_zero_zero_is_played(self):
        """0-0 is a real result, not a missing one."""
        assert Match(home='A', away='B', home_score=0, away_score=0).is_played

    def test_one_score_missing_is_unplayed(self):
        assert not Match(home='A', away='B', home_score=1).is_played

    def test_match_repr(self):
        repr_str = repr(Match(home='Lions', away='Tigers', home_score=3, away_score=1))
        assert 'Lions' in repr_str
        assert '3:1' in repr_str


class TestScoreHelper:
    """Tests for is_score."""

    @pytest.mark.parametrize('value', [0, 3, '2'])
    def test_real_scores(self, value):
        assert is_score(value)

    @pytest.mark.parametrize('value', [None, '', SCORE_SENTINEL])
    def test_missing_scores(self, value):
        assert not is_score(value)


class TestGroupResult:
    """Tests for GroupResult."""

    def test_empty_group(self):
        group = GroupResult(name='Group A')
        assert group.standings == []
        assert group.matches == []
        assert group.kind == 'group'

    def test_played_matches_excludes_unplayed(self):
        group = GroupResult(name='Group A', matches=[
            Match(home='A', away='B', home_score=1, away_score=0),
            Match(home='C', away='D'),
        ])
        assert [m.home for m in group.played_matches] == ['A']

    def test_to_dict(self):
        group = GroupResult(name='Group A', standings=[Standing(position=1, team='Lions', pts=9)])
        data = group.to_dict()
        assert data['kind'] == 'group'
        assert data['standings'][0]['team'] == 'Lions'
        assert data['standings'][0]['pts'] == 9
        assert data['matches'] == []


class TestQualifiedTeam:
    """Tests for QualifiedTeam equality and serialization."""

    def test_equality_by_value(self):
        assert QualifiedTeam('Lions', 'groupa', 1, 9, 7, 9) == QualifiedTeam('Lions', 'groupa', 1, 9, 7, 9)
        assert QualifiedTeam('Lions', 'groupa', 1) != QualifiedTeam('Lions', 'groupb', 1)

    def test_to_dict_keys(self):
        data = QualifiedTeam('Lions', 'a', 1, 15, 6, 20).to_dict()
        assert data == {'team': 'Lions', 'group': 'a', 'position': 1, 'pts': 15, 'gd': 6, 'gf': 20}


class TestPlayoffsResult:
    """Tests for PlayoffsResult."""

    def test_defaults(self):
        playoffs = PlayoffsResult()
        assert playoffs.name == 'Knockout Stage'
        assert playoffs.kind == 'playoffs'
        assert playoffs.final is None
        assert playoffs.third_place is None
        assert not playoffs.generated

    def test_to_dict_with_final(self):
        playoffs = PlayoffsResult(final=KnockoutMatch('Winner SF1', 'Winner SF2', 'Final'))
        data = playoffs.to_dict()
        assert data['final']['match_name'] == 'Final'
        assert data['third_place'] is None


class TestTournamentModel:
    """Tests for TournamentModel."""

    def test_iterates_in_insertion_order(self):
        model = TournamentModel({
            'groupb': GroupResult('Group B'),
            'playoffs': PlayoffsResult(),
            'groupa': GroupResult('Group A'),
        })
        assert list(model) == ['groupb', 'playoffs', 'groupa']
        assert len(model) == 3

    def test_groups_and_playoffs(self):
        model = TournamentModel({'groupa': GroupResult('Group A'), 'playoffs': PlayoffsResult()})
        assert list(model.groups) == ['groupa']
        assert model.playoffs is model['playoffs']
        assert 'groupa' in model

    def test_playoffs_missing(self):
        assert TournamentModel().playoffs is None


class TestSheetRoleAndWorkbook:
    """Tests for SheetRole and Workbook."""

    def test_sheet_role_equality(self):
        assert SheetRole('group', 'groupa', 'Group A') == SheetRole('group', 'groupa', 'Group A')
        assert SheetRole('group', 'groupa') != SheetRole('playoffs', 'groupa')

    def test_workbook_sheet_order(self):
        workbook = Workbook({'GroupB': [['x']], 'GroupA': []})
        assert workbook.sheet_names == ['GroupB', 'GroupA']
        assert workbook.rows('GroupB') == [['x']]
        assert workbook.rows('Missing') == []
