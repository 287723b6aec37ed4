"""
Builds the tournament model from a decoded workbook.
"""
import logging
import re
from typing import Dict, Iterable, Sequence

from tournament.bracket import generate_playoffs
from tournament.group_sheet import parse_group_sheet
from tournament.models import SheetRole, TournamentModel, Workbook
from tournament.playoffs_sheet import parse_playoffs_sheet
from tournament.qualification import QUALIFICATION_GROUPS, calculate_qualified_teams

logger = logging.getLogger(__name__)

SHEET_ALIASES = {
    'GroupA': 'groupa',
    'GroupB': 'groupb',
    'GroupC': 'groupc',
    'Dames': 'dames',
    'Playoffs': 'playoffs',
    'playoffs': 'playoffs',
}
SKIP_SHEETS = ('Options',)
PLAYOFFS_SHEET = 'playoffs'


def classify_sheet(sheet_name: str, aliases: Dict[str, str] = None,
                   skip_sheets: Iterable[str] = SKIP_SHEETS) -> SheetRole:
    """Decide how a sheet is parsed and which tab it becomes."""
    aliases = SHEET_ALIASES if aliases is None else aliases
    if sheet_name in skip_sheets:
        return SheetRole('skip', '')

    normalized = sheet_name.lower()
    key = aliases.get(sheet_name) or re.sub(r'\s+', '', normalized)
    if normalized == PLAYOFFS_SHEET:
        return SheetRole('playoffs', key)
    return SheetRole('group', key, sheet_name.replace('Group', 'Group ', 1))


PARSERS = {
    'group': lambda grid, role: parse_group_sheet(grid, role.display_name),
    'playoffs': lambda grid, role: parse_playoffs_sheet(grid),
}


def parse_workbook(workbook: Workbook, group_order: Sequence[str] = QUALIFICATION_GROUPS,
                   aliases: Dict[str, str] = None,
                   skip_sheets: Iterable[str] = SKIP_SHEETS) -> TournamentModel:
    """
    Parse every sheet and derive the knockout stage.

    Qualified teams are always recalculated from the group standings. An
    authored playoffs sheet keeps its semi-finals, final and 3rd place match
    untouched; only when there is no playoffs sheet at all is a bracket
    generated.
    """
    skip_sheets = tuple(skip_sheets)
    tabs = {}
    for sheet_name in workbook.sheet_names:
        role = classify_sheet(sheet_name, aliases, skip_sheets)
        if role.kind == 'skip':
            logger.debug(f"Skipping sheet {sheet_name}")
            continue
        tabs[role.key] = PARSERS[role.kind](workbook.rows(sheet_name), role)

    logger.info(f"Parsed sheets: {list(tabs)}")
    model = TournamentModel(tabs)
    qualified = calculate_qualified_teams(model.groups, group_order)

    playoffs = model.playoffs
    if playoffs is not None:
        playoffs.qualified_teams = qualified
        logger.info(
            f"Playoffs merged: {len(qualified)} qualified, {len(playoffs.semi_finals)} semi-finals, "
            f"final={playoffs.final is not None}, third_place={playoffs.third_place is not None}"
        )
        return model

    logger.info("No playoffs sheet found, generating bracket from group standings")
    tabs[TournamentModel.PLAYOFFS_KEY] = generate_playoffs(qualified)
    return TournamentModel(tabs)
