"""
Knockout qualification from group standings.

Group winners qualify, plus the single best runner-up across the groups.
"""
import logging
from typing import Dict, List, Sequence

from tournament.models import GroupResult, QualifiedTeam

logger = logging.getLogger(__name__)

QUALIFICATION_GROUPS = ('groupa', 'groupb', 'groupc')


def runner_up_sort_key(team: QualifiedTeam):
    """Ranking key for runners-up: points, then goal difference, then goals for."""
    return (-team.pts, -team.gd, -team.gf)


def _qualified_from_standing(standing, group_id, position) -> QualifiedTeam:
    return QualifiedTeam(
        team=standing.team,
        group=group_id,
        position=position,
        pts=standing.pts or 0,
        gd=standing.gd or 0,
        gf=standing.gf or 0,
    )


def calculate_qualified_teams(groups: Dict[str, GroupResult],
                              group_order: Sequence[str] = QUALIFICATION_GROUPS) -> List[QualifiedTeam]:
    """
    Work out the teams that go through to the knockout stage.

    Returns winners in group_order followed by the best runner-up. The list is
    not re-sorted by strength, so the bracket can rely on positions 0-2 being
    the winners of the first, second and third group.
    """
    qualified = []
    runners_up = []

    for group_id in group_order:
        group = groups.get(group_id)
        if group is None or not group.standings:
            continue
        standings = group.standings

        if standings[0].team:
            winner = _qualified_from_standing(standings[0], group_id, 1)
            qualified.append(winner)
            logger.debug(f"{group_id.upper()} winner: {winner.team} ({winner.pts} pts, GD {winner.gd})")

        if len(standings) > 1 and standings[1].team:
            runners_up.append(_qualified_from_standing(standings[1], group_id, 2))

    # sorted() is stable: on a full tie the earlier group keeps the spot
    runners_up = sorted(runners_up, key=runner_up_sort_key)
    if runners_up:
        best = runners_up[0]
        qualified.append(best)
        logger.debug(f"Best runner-up: {best.team} from {best.group.upper()} ({best.pts} pts, GD {best.gd})")

    return qualified
