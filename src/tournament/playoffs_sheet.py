"""
Parser for the knockout-stage sheet.

The playoffs sheet template has no headers worth scanning for; every section
lives at a fixed row (0-based):

    rows 4-8    qualified teams   team | group | position | pts | gd | gf
    rows 13-14  semi-finals       home | away | home score | ':' | away score
    row 19      final             same shape as a semi-final
    row 22      3rd place match   same shape as a semi-final

The offsets are those of the existing spreadsheet template and must not move.
check_playoffs_layout() reports when the sheet looks shifted.
"""
import logging
from typing import List, Optional

from tournament.models import KnockoutMatch, PlayoffsResult, QualifiedTeam
from tournament.scanner import cell_text, get_row, parse_int, parse_score

logger = logging.getLogger(__name__)

QUALIFIED_ROWS = range(4, 9)
SEMI_FINAL_ROWS = (13, 14)
FINAL_ROW = 19
THIRD_PLACE_ROW = 22

QUALIFIED_COLUMNS = {'team': 0, 'group': 1, 'position': 2, 'pts': 3, 'gd': 4, 'gf': 5}
KNOCKOUT_COLUMNS = {'home': 0, 'away': 1, 'home_score': 2, 'separator': 3, 'away_score': 4}
SEPARATOR = ':'


def parse_qualified_rows(grid) -> List[QualifiedTeam]:
    """Read the qualified teams block, skipping header rows that leak in."""
    teams = []
    for index in QUALIFIED_ROWS:
        row = get_row(grid, index) or []
        team = cell_text(row, QUALIFIED_COLUMNS['team'])
        group = cell_text(row, QUALIFIED_COLUMNS['group']).lower()
        if not team or not group or 'team' in team.lower():
            continue
        position = parse_int(cell_text(row, QUALIFIED_COLUMNS['position'])) or len(teams) + 1
        teams.append(QualifiedTeam(
            team=team,
            group=group,
            position=position,
            pts=parse_int(cell_text(row, QUALIFIED_COLUMNS['pts'])),
            gd=parse_int(cell_text(row, QUALIFIED_COLUMNS['gd'])),
            gf=parse_int(cell_text(row, QUALIFIED_COLUMNS['gf'])),
        ))
    return teams


def _has_knockout_shape(row) -> bool:
    return bool(
        cell_text(row, KNOCKOUT_COLUMNS['home'])
        and cell_text(row, KNOCKOUT_COLUMNS['away'])
        and cell_text(row, KNOCKOUT_COLUMNS['separator']) == SEPARATOR
    )


def _is_semi_final_header(row) -> bool:
    home = cell_text(row, KNOCKOUT_COLUMNS['home']).lower()
    away = cell_text(row, KNOCKOUT_COLUMNS['away']).lower()
    return 'home team' in home or 'away team' in away


def _is_final_header(row) -> bool:
    return 'home' in cell_text(row, KNOCKOUT_COLUMNS['home']).lower()


def parse_knockout_row(row, match_name, is_header=_is_final_header) -> Optional[KnockoutMatch]:
    """Build a knockout match from a fixed-layout row, or None if the row has no match."""
    if row is None or not _has_knockout_shape(row) or is_header(row):
        return None
    return KnockoutMatch(
        home=cell_text(row, KNOCKOUT_COLUMNS['home']),
        away=cell_text(row, KNOCKOUT_COLUMNS['away']),
        home_score=parse_score(cell_text(row, KNOCKOUT_COLUMNS['home_score'])),
        away_score=parse_score(cell_text(row, KNOCKOUT_COLUMNS['away_score'])),
        match_name=match_name,
    )


def parse_semi_finals(grid) -> List[KnockoutMatch]:
    semi_finals = []
    for index in SEMI_FINAL_ROWS:
        match = parse_knockout_row(
            get_row(grid, index),
            f"Semi-Final {len(semi_finals) + 1}",
            is_header=_is_semi_final_header,
        )
        if match:
            semi_finals.append(match)
    return semi_finals


def _looks_like_qualified_row(row) -> bool:
    team = cell_text(row, QUALIFIED_COLUMNS['team'])
    group = cell_text(row, QUALIFIED_COLUMNS['group'])
    return bool(team and group and 'team' not in team.lower()
                and cell_text(row, QUALIFIED_COLUMNS['pts']).lstrip('+-').isdigit())


def _row_span(rows) -> str:
    if rows[0] == rows[-1]:
        return f"row {rows[0]}"
    return f"rows {rows[0]}-{rows[-1]}"


def check_playoffs_layout(grid, qualified_teams, semi_finals, final, third_place) -> List[str]:
    """Flag sections that came back empty while a neighbouring row has their shape."""
    warnings = []
    if not qualified_teams:
        for index in (QUALIFIED_ROWS[0] - 1, QUALIFIED_ROWS[-1] + 1):
            row = get_row(grid, index)
            if row is not None and _looks_like_qualified_row(row):
                warnings.append(f"Qualified teams found at row {index}, expected "
                                f"{_row_span(QUALIFIED_ROWS)}")
                break

    sections = [
        ('Semi-final', SEMI_FINAL_ROWS, bool(semi_finals)),
        ('Final', (FINAL_ROW,), final is not None),
        ('3rd place', (THIRD_PLACE_ROW,), third_place is not None),
    ]
    for label, rows, found in sections:
        if found:
            continue
        for index in (rows[0] - 1, rows[-1] + 1):
            row = get_row(grid, index)
            if row is not None and _has_knockout_shape(row) and not _is_semi_final_header(row):
                warnings.append(f"{label} found at row {index}, expected {_row_span(rows)}")
                break
    return warnings


def parse_playoffs_sheet(grid) -> PlayoffsResult:
    """Parse the knockout sheet at its fixed offsets.

    The qualified teams read here are replaced by the live calculation when
    the workbook is assembled.
    """
    qualified_teams = parse_qualified_rows(grid)
    semi_finals = parse_semi_finals(grid)
    final = parse_knockout_row(get_row(grid, FINAL_ROW), 'Final')
    third_place = parse_knockout_row(get_row(grid, THIRD_PLACE_ROW), '3rd Place')

    warnings = check_playoffs_layout(grid, qualified_teams, semi_finals, final, third_place)
    for warning in warnings:
        logger.warning(f"Playoffs: {warning}")

    logger.debug(
        f"Playoffs: {len(qualified_teams)} qualified, {len(semi_finals)} semi-finals, "
        f"{'final' if final else 'no final'}, {'3rd place' if third_place else 'no 3rd place'}"
    )
    return PlayoffsResult(
        qualified_teams=qualified_teams,
        semi_finals=semi_finals,
        final=final,
        third_place=third_place,
        warnings=warnings,
    )
