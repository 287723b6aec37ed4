# Console report of a tournament spreadsheet

import argparse
import logging
import os
import sys
from tournament.assembler import parse_workbook
from tournament import display
from workbook import WorkbookUnavailable, CACHE_FILENAME, load_local_workbook, load_remote_workbook


def print_group(tab):
    print(f"\n# {tab.name}")
    if tab.standings:
        stats = display.group_stats(tab)
        print(f"Teams: {stats['teams']}  Matches played: {stats['matches_played']}  Goals: {stats['total_goals']}")
        print(f"{'Pos':>3}  {'Team':<24}{'GP':>4}{'W':>4}{'D':>4}{'L':>4}{'GF':>4}{'GA':>4}{'GD':>5}{'PTS':>5}")
        for s in tab.standings:
            print(f"{s.position:>3}  {s.team:<24}{s.gp:>4}{s.w:>4}{s.d:>4}{s.l:>4}{s.gf:>4}{s.ga:>4}"
                  f"{display.signed(s.gd, include_zero=True):>5}{s.pts:>5}")
    else:
        print("No standings data available.")
    for match in tab.matches:
        print(f"  {match.time or '-':>5} {match.location or '-':<12} "
              f"{match.home} {display.score_text(match)} {match.away}")


def print_playoffs(tab):
    print(f"\n# {tab.name}")
    if not tab.qualified_teams:
        print("No qualified teams yet.")
        return
    for index, team in enumerate(tab.qualified_teams, 1):
        print(f"  {index}. {team.team} ({display.group_label(team.group)} - {display.qualified_badge(team)}) "
              f"PTS {team.pts} GD {display.signed(team.gd)} GF {team.gf}")
    for match in [*tab.semi_finals, tab.final, tab.third_place]:
        if match:
            print(f"  {match.match_name}: {match.home} {match.home_score} - {match.away_score} {match.away}")


def main():
    parser = argparse.ArgumentParser(description='Print standings and knockout bracket from a tournament spreadsheet.')
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('file', nargs='?', help='Path to a local .xlsx file')
    source.add_argument('--url', help='URL of the published .xlsx export')
    parser.add_argument('--verbose', action='store_true', help='Show parser diagnostics')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    script_dir = os.path.dirname(__file__)
    data_dir = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(os.path.dirname(script_dir), 'data'))

    try:
        if args.url:
            workbook, _ = load_remote_workbook(args.url, os.path.join(data_dir, CACHE_FILENAME))
        else:
            workbook = load_local_workbook(args.file)
    except WorkbookUnavailable as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    model = parse_workbook(workbook)
    for tab in model.groups.values():
        print_group(tab)
    if model.playoffs:
        print_playoffs(model.playoffs)


if __name__ == '__main__':
    main()
