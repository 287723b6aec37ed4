"""
Semi-final bracket generation for when the workbook has no playoffs sheet.
"""
import logging
from typing import List, Sequence, Tuple

from tournament.models import SCORE_SENTINEL, KnockoutMatch, PlayoffsResult, QualifiedTeam

logger = logging.getLogger(__name__)

BRACKET_SIZE = 4


def pair_semi_finals(qualified: Sequence[QualifiedTeam]) -> List[Tuple[QualifiedTeam, QualifiedTeam]]:
    """
    Pair the four qualified teams so the runner-up never meets its own group winner.

    Expects the calculator order: three group winners, then the best runner-up.
    When the runner-up shares a group with none of the winners, the default
    pairing 1v4, 2v3 is used.
    """
    team1, team2, team3, team4 = qualified[:BRACKET_SIZE]

    if team4.group == team1.group:
        return [(team1, team3), (team2, team4)]
    elif team4.group == team2.group:
        return [(team1, team2), (team3, team4)]
    elif team4.group == team3.group:
        return [(team1, team4), (team2, team3)]
    else:
        return [(team1, team4), (team2, team3)]


def _semi_final(home: QualifiedTeam, away: QualifiedTeam, number: int) -> KnockoutMatch:
    return KnockoutMatch(
        home=home.team,
        away=away.team,
        home_group=home.group,
        away_group=away.group,
        home_score=SCORE_SENTINEL,
        away_score=SCORE_SENTINEL,
        match_name=f"Semi-Final {number}",
    )


def placeholder_final() -> KnockoutMatch:
    return KnockoutMatch(home='Winner SF1', away='Winner SF2', match_name='Final')


def generate_playoffs(qualified: Sequence[QualifiedTeam]) -> PlayoffsResult:
    """Build a knockout stage from the qualified teams alone.

    With fewer than four qualified teams the result has no bracket.
    """
    playoffs = PlayoffsResult(qualified_teams=list(qualified), generated=True)
    if len(qualified) < BRACKET_SIZE:
        logger.debug(f"Only {len(qualified)} qualified teams, no bracket generated")
        return playoffs

    pairs = pair_semi_finals(qualified)
    playoffs.semi_finals = [_semi_final(home, away, number) for number, (home, away) in enumerate(pairs, 1)]
    playoffs.final = placeholder_final()

    for match in playoffs.semi_finals:
        logger.debug(f"{match.match_name}: {match.home} ({match.home_group}) vs {match.away} ({match.away_group})")
    return playoffs
