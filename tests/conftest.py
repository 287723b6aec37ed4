"""
Shared pytest fixtures for tournament sheet viewer tests.

Grids mirror what the workbook decoder produces: lists of string rows with
blank cells as ''. Row indices are 0-based (spreadsheet row = index + 1).
"""
import pytest
import sys
import os
import io

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
os.environ.setdefault('SECRET_KEY', 'test-secret-key')

import openpyxl

from tournament.models import GroupResult, Standing, Workbook

STANDINGS_HEADER = ['Team', 'GP', 'W', 'D', 'L', 'GF', 'GA', 'GD', 'PTS']


def make_grid(rows, length=None, width=17):
    """Build a grid of `length` blank rows and place the given {index: cells} rows."""
    if length is None:
        length = max(rows) + 1 if rows else 0
    grid = [[''] * width for _ in range(length)]
    for index, cells in rows.items():
        row = [str(cell) for cell in cells]
        grid[index] = row + [''] * (width - len(row))
    return grid


def group_sheet_rows(teams, matches, header_row=10):
    """Rows for a group sheet: a 'Round 1' header with matches underneath and
    the standings table to the right (team column 8, GP column 9).

    teams: list of (name, gp, w, d, l, gf, ga, gd, pts)
    matches: list of (location, time, home, away, home_score, away_score)
    """
    rows = {header_row: ['Round 1', '', '', '', '', '', '', ''] + STANDINGS_HEADER}
    for i in range(max(len(teams), len(matches))):
        left = ['', '', '', '', '', '', '', '']
        if i < len(matches):
            location, time, home, away, home_score, away_score = matches[i]
            left = [location, time, home, away, home_score, ':', away_score, '']
        right = list(teams[i]) if i < len(teams) else []
        rows[header_row + 1 + i] = left + right
    return rows


@pytest.fixture
def group_a_grid():
    """Group A with four teams and two of four matches played."""
    teams = [
        ('Lions', 3, 3, 0, 0, 9, 2, 7, 9),
        ('Bears', 3, 1, 1, 1, 5, 5, 0, 4),
        ('Wolves', 3, 0, 2, 1, 4, 6, -2, 2),
        ('Tigers', 3, 0, 1, 2, 3, 8, -5, 1),
    ]
    matches = [
        ('Field 1', '10:00', 'Lions', 'Tigers', '3', '1'),
        ('Field 2', '10:30', 'Bears', 'Wolves', '2', '2'),
        ('Field 1', '11:00', 'Lions', 'Bears', '', ''),
        ('Field 2', '11:30', 'Tigers', 'Wolves', '', ''),
    ]
    return make_grid(group_sheet_rows(teams, matches), length=20)


def standings_group(name, rows):
    """GroupResult built straight from (team, pts, gd, gf) tuples."""
    standings = [
        Standing(position=i + 1, team=team, pts=pts, gd=gd, gf=gf)
        for i, (team, pts, gd, gf) in enumerate(rows)
    ]
    return GroupResult(name=name, standings=standings)


@pytest.fixture
def three_groups():
    """Parsed groups A-C; the best runner-up (Bears, 10 pts) comes from Group B."""
    return {
        'groupa': standings_group('Group A', [('Lions', 12, 8, 14), ('Tigers', 7, 1, 6), ('Hawks', 3, -9, 2)]),
        'groupb': standings_group('Group B', [('Eagles', 10, 6, 12), ('Bears', 10, 5, 9), ('Foxes', 1, -11, 3)]),
        'groupc': standings_group('Group C', [('Owls', 9, 4, 10), ('Sharks', 8, 9, 11), ('Crows', 4, -13, 1)]),
    }


@pytest.fixture
def playoffs_grid():
    """Playoffs sheet following the template offsets, fully filled in."""
    return make_grid({
        0: ['Knockout Stage'],
        3: ['Team', 'Group', 'Position', 'PTS', 'GD', 'GF'],
        4: ['Lions', 'A', '1', '15', '6', '20'],
        5: ['Bears', 'B', '1', '12', '4', '11'],
        6: ['Owls', 'C', '1', '10', '3', '9'],
        7: ['Tigers', 'A', '2', '9', '2', '8'],
        11: ['Semi-Finals'],
        12: ['Home Team', 'Away Team', '', '', ''],
        13: ['Lions', 'Owls', '2', ':', '1'],
        14: ['Bears', 'Tigers', '', ':', ''],
        18: ['Final'],
        19: ['Lions', 'Bears', '', ':', ''],
        21: ['3rd Place'],
        22: ['Owls', 'Tigers', '1', ':', '0'],
    }, length=25)


@pytest.fixture
def tournament_workbook(group_a_grid):
    """Workbook with three group sheets, a Dames sheet and the Options sheet."""
    group_b = make_grid(group_sheet_rows(
        [('Eagles', 3, 2, 1, 0, 7, 3, 4, 7), ('Hawks', 3, 2, 0, 1, 6, 4, 2, 6), ('Foxes', 3, 0, 1, 2, 2, 8, -6, 1)],
        [('Field 3', '10:00', 'Eagles', 'Hawks', '1', '0')],
    ), length=20)
    group_c = make_grid(group_sheet_rows(
        [('Owls', 2, 2, 0, 0, 5, 1, 4, 6), ('Sharks', 2, 1, 0, 1, 4, 3, 1, 3), ('Crows', 2, 0, 0, 2, 1, 6, -5, 0)],
        [('Field 4', '12:00', 'Owls', 'Crows', '3', '0')],
    ), length=20)
    dames = make_grid(group_sheet_rows(
        [('Queens', 1, 1, 0, 0, 2, 0, 2, 3), ('Duchesses', 1, 0, 0, 1, 0, 2, -2, 0)],
        [('Field 5', '13:00', 'Queens', 'Duchesses', '2', '0')],
    ), length=20)
    return Workbook({
        'GroupA': group_a_grid,
        'GroupB': group_b,
        'GroupC': group_c,
        'Dames': dames,
        'Options': make_grid({0: ['Setting', 'Value']}),
    })


def grids_to_xlsx(sheets):
    """Serialize {sheet name: grid} to xlsx bytes. Numeric strings become numbers."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, grid in sheets.items():
        ws = wb.create_sheet(name)
        for r, row in enumerate(grid, 1):
            for c, value in enumerate(row, 1):
                if value == '':
                    continue
                ws.cell(row=r, column=c, value=int(value) if value.lstrip('-').isdigit() else value)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
