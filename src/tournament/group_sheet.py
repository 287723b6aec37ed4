"""
Parser for a single group-stage sheet: the match list and the standings table.

Layout of the group sheets:
- A "Round" header somewhere in rows 10-15, followed by match rows laid out as
  location | time | home | away | home score | ':' | away score
- A standings header (GP ... PTS) in rows 10-15, usually to the right of the
  matches, followed by up to six team rows. The team name sits one column left
  of GP and the stats follow GP in fixed order.
"""
import logging
from typing import List, Optional

from tournament.models import GroupResult, Match, Standing
from tournament.scanner import (
    STANDINGS_LABELS,
    cell_text,
    find_column,
    find_header_row,
    get_row,
    has_standings_header,
    is_blank,
    parse_score,
    read_fields,
)

logger = logging.getLogger(__name__)

ROUND_HEADER_WINDOW = (10, 15)
STANDINGS_WINDOW = (10, 15)
HEURISTIC_WINDOW = (11, 50)
MAX_EMPTY_ROWS = 3
MAX_STANDINGS_ROWS = 6

# Match row columns
LOCATION_COL = 0
TIME_COL = 1
HOME_COL = 2
AWAY_COL = 3
HOME_SCORE_COL = 4
SEPARATOR_COL = 5
AWAY_SCORE_COL = 6

# Standings columns relative to the GP column; the team name is one to the left
STANDINGS_ANCHOR = 'GP'
STANDINGS_NAME_OFFSET = -1
STANDINGS_OFFSETS = {field: offset for offset, field in enumerate(Standing.FIELDS)}

MATCH_HEADER_PHRASES = ('home team', 'locatie', 'round')


def _match_from_row(row) -> Match:
    return Match(
        location=cell_text(row, LOCATION_COL),
        time=cell_text(row, TIME_COL),
        home=cell_text(row, HOME_COL),
        away=cell_text(row, AWAY_COL),
        home_score=parse_score(cell_text(row, HOME_SCORE_COL)),
        away_score=parse_score(cell_text(row, AWAY_SCORE_COL)),
    )


def find_round_header(grid) -> Optional[int]:
    """Index of the first row in the round window with a cell mentioning 'round'."""
    first, last = ROUND_HEADER_WINDOW
    for index in range(first, last + 1):
        row = get_row(grid, index)
        if row is None:
            continue
        if any('round' in cell_text(row, col).lower() for col in range(len(row))):
            return index
    return None


def find_labeled_matches(grid) -> List[Match]:
    """Read the match rows following the 'Round' header.

    Stops after three consecutive empty rows or when the standings header
    shows up in the first four columns.
    """
    header = find_round_header(grid)
    if header is None:
        return []

    logger.debug(f"Round header at row {header}")
    matches = []
    empty_rows = 0
    index = header + 1
    while index < len(grid) and empty_rows < MAX_EMPTY_ROWS:
        row = get_row(grid, index)
        index += 1
        if row is None:
            empty_rows += 1
            continue
        if has_standings_header(row):
            logger.debug(f"Standings header reached at row {index - 1}")
            break
        if is_blank(row):
            empty_rows += 1
            continue
        empty_rows = 0

        home = cell_text(row, HOME_COL)
        away = cell_text(row, AWAY_COL)
        if not home or not away or 'round' in home.lower() or 'round' in away.lower():
            continue
        matches.append(_match_from_row(row))
    return matches


def _looks_like_match(row) -> bool:
    if any(not cell_text(row, col) for col in (LOCATION_COL, TIME_COL, HOME_COL, AWAY_COL)):
        return False
    has_colon = ':' in cell_text(row, SEPARATOR_COL)
    has_scores = any(cell_text(row, col) not in ('', '-') for col in (HOME_SCORE_COL, AWAY_SCORE_COL))
    if not (has_colon or has_scores):
        return False
    home = cell_text(row, HOME_COL).lower()
    return not any(phrase in home for phrase in MATCH_HEADER_PHRASES)


def find_heuristic_matches(grid) -> List[Match]:
    """Pick out rows that look like matches when there is no 'Round' header.

    A row qualifies when location, time and both teams are filled and it has
    either a ':' separator or a score.
    """
    first, last = HEURISTIC_WINDOW
    matches = []
    empty_rows = 0
    index = first
    while index < min(len(grid), last) and empty_rows < MAX_EMPTY_ROWS:
        row = get_row(grid, index)
        index += 1
        if row is None:
            empty_rows += 1
            continue
        if has_standings_header(row):
            break
        if _looks_like_match(row):
            empty_rows = 0
            matches.append(_match_from_row(row))
        elif is_blank(row):
            empty_rows += 1
    return matches


MATCH_STRATEGIES = (find_labeled_matches, find_heuristic_matches)


def extract_matches(grid, strategies=MATCH_STRATEGIES) -> List[Match]:
    """Return the matches from the first strategy that finds any."""
    for strategy in strategies:
        matches = strategy(grid)
        if matches:
            logger.debug(f"{strategy.__name__} found {len(matches)} matches")
            return matches
    return []


def extract_standings(grid) -> List[Standing]:
    """Read the standings table below the GP/PTS header row."""
    first, last = STANDINGS_WINDOW
    header = find_header_row(grid, STANDINGS_LABELS, first, last)
    if header is None:
        return []

    gp_col = find_column(grid[header], STANDINGS_ANCHOR)
    team_col = gp_col + STANDINGS_NAME_OFFSET
    standings = []
    for index in range(header + 1, header + MAX_STANDINGS_ROWS + 1):
        row = get_row(grid, index)
        if row is None:
            continue
        team = cell_text(row, team_col)
        if not team or team == '-':
            continue
        fields = read_fields(row, gp_col, STANDINGS_OFFSETS)
        standings.append(Standing(position=len(standings) + 1, team=team, **fields))
    return standings


def check_group_layout(grid, matches, standings) -> List[str]:
    """Report section headers that exist but sit outside the scanned rows."""
    warnings = []
    if not standings:
        header = find_header_row(grid, STANDINGS_LABELS, 0, len(grid) - 1)
        if header is not None:
            warnings.append(
                f"Standings header found at row {header}, outside rows "
                f"{STANDINGS_WINDOW[0]}-{STANDINGS_WINDOW[1]}"
            )
    if not matches:
        first, last = ROUND_HEADER_WINDOW
        for index, row in enumerate(grid):
            if first <= index <= last:
                continue
            if any('round' in cell_text(row, col).lower() for col in range(len(row))):
                warnings.append(f"Round header found at row {index}, outside rows {first}-{last}")
                break
    return warnings


def parse_group_sheet(grid, name) -> GroupResult:
    """Parse one group sheet into its matches and standings."""
    matches = extract_matches(grid)
    standings = extract_standings(grid)
    warnings = check_group_layout(grid, matches, standings)
    for warning in warnings:
        logger.warning(f"{name}: {warning}")
    logger.debug(f"{name}: {len(standings)} teams, {len(matches)} matches")
    return GroupResult(name=name, standings=standings, matches=matches, warnings=warnings)
