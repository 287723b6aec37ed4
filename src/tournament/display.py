"""
Presentation helpers shared by the web templates and the console report.
"""
from typing import Dict, Optional

from tournament.models import GroupResult, KnockoutMatch, QualifiedTeam, is_score

QUALIFICATION_RULES = [
    'Winners of Group A, B, and C advance',
    'Best 2nd place team advances',
    'Best 2nd place is determined by: Points → Goal Difference → Goals For',
]


def group_stats(group: GroupResult) -> Dict[str, int]:
    """Summary cards for a group tab: team count, matches played, total goals."""
    return {
        'teams': len(group.standings),
        'matches_played': len(group.played_matches),
        'total_goals': sum(standing.gf for standing in group.standings),
    }


def score_text(match) -> str:
    """'2 : 1' for a played match, 'vs' otherwise."""
    if match.is_played:
        return f"{match.home_score} : {match.away_score}"
    return 'vs'


def signed(value: int, include_zero: bool = False) -> str:
    """Goal difference with an explicit sign.

    Standings tables show zero as "+0"; the qualified team cards show "0".
    """
    if value > 0 or (include_zero and value == 0):
        return f"+{value}"
    return str(value)


def standings_row_class(index: int) -> str:
    if index == 0:
        return 'highlight-first'
    if index == 1:
        return 'highlight-second'
    return ''


def group_label(group_id: str) -> str:
    """'groupa' -> 'GROUP A'."""
    return group_id.replace('group', 'Group ', 1).upper()


def qualified_badge(team: QualifiedTeam) -> str:
    return 'Winner' if team.position == 1 else '2nd Place (Best)'


def _score_value(score) -> Optional[float]:
    if not is_score(score):
        return None
    try:
        return float(score)
    except (TypeError, ValueError):
        return None


def match_winner(match: Optional[KnockoutMatch]) -> Optional[str]:
    """'home' or 'away' when the scores decide a winner, else None."""
    if match is None:
        return None
    home = _score_value(match.home_score)
    away = _score_value(match.away_score)
    if home is None or away is None or home == away:
        return None
    return 'home' if home > away else 'away'


def bracket_view(playoffs) -> Optional[Dict]:
    """Slots for the bracket diagram, or None when there are no semi-finals yet.

    A missing second semi-final shows as TBD and a missing final as the
    winners of the two semi-finals.
    """
    if not playoffs.semi_finals:
        return None
    semi_one = playoffs.semi_finals[0]
    semi_two = playoffs.semi_finals[1] if len(playoffs.semi_finals) > 1 else None
    return {
        'semi_finals': [
            _slot(semi_one),
            _slot(semi_two) if semi_two else _placeholder_slot('TBD', 'TBD'),
        ],
        'final': _slot(playoffs.final) if playoffs.final else _placeholder_slot('Winner SF1', 'Winner SF2'),
        'third_place': _slot(playoffs.third_place) if playoffs.third_place else None,
    }


def _slot(match: KnockoutMatch) -> Dict:
    winner = match_winner(match)
    return {
        'match_name': match.match_name,
        'home': match.home,
        'away': match.away,
        'home_score': match.home_score,
        'away_score': match.away_score,
        'home_wins': winner == 'home',
        'away_wins': winner == 'away',
    }


def _placeholder_slot(home: str, away: str) -> Dict:
    return {
        'match_name': '',
        'home': home,
        'away': away,
        'home_score': '-',
        'away_score': '-',
        'home_wins': False,
        'away_wins': False,
    }
