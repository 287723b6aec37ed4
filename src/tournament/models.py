"""
Data models for a parsed tournament workbook.
"""
from typing import Dict, List, Optional, Union

SCORE_SENTINEL = '-'

Score = Union[int, str]


def is_score(value) -> bool:
    """Return True if value is a real score rather than the unplayed sentinel."""
    return value is not None and value != '' and value != SCORE_SENTINEL


class Match:
    def __init__(self, home, away, home_score=SCORE_SENTINEL, away_score=SCORE_SENTINEL,
                 location='', time=''):
        self.location = location
        self.time = time
        self.home = home
        self.away = away
        self.home_score = home_score
        self.away_score = away_score

    @property
    def is_played(self):
        return is_score(self.home_score) and is_score(self.away_score)

    def to_dict(self):
        return {
            'location': self.location,
            'time': self.time,
            'home': self.home,
            'away': self.away,
            'home_score': self.home_score,
            'away_score': self.away_score,
        }

    def __repr__(self):
        return (f"Match(home={self.home}, away={self.away}, "
                f"score={self.home_score}:{self.away_score}, time={self.time})")


class Standing:
    FIELDS = ('gp', 'w', 'd', 'l', 'gf', 'ga', 'gd', 'pts')

    def __init__(self, position, team, gp=0, w=0, d=0, l=0, gf=0, ga=0, gd=0, pts=0):
        self.position = position
        self.team = team
        self.gp = gp
        self.w = w
        self.d = d
        self.l = l
        self.gf = gf
        self.ga = ga
        self.gd = gd
        self.pts = pts

    def to_dict(self):
        data = {'position': self.position, 'team': self.team}
        for field in self.FIELDS:
            data[field] = getattr(self, field)
        return data

    def __repr__(self):
        return f"Standing(position={self.position}, team={self.team}, pts={self.pts}, gd={self.gd})"


class GroupResult:
    kind = 'group'

    def __init__(self, name, standings=None, matches=None, warnings=None):
        self.name = name
        self.standings: List[Standing] = standings if standings else []
        self.matches: List[Match] = matches if matches else []
        self.warnings: List[str] = warnings if warnings else []

    @property
    def played_matches(self):
        return [m for m in self.matches if m.is_played]

    def to_dict(self):
        return {
            'kind': self.kind,
            'name': self.name,
            'standings': [s.to_dict() for s in self.standings],
            'matches': [m.to_dict() for m in self.matches],
            'warnings': list(self.warnings),
        }

    def __repr__(self):
        return (f"GroupResult(name={self.name}, standings={len(self.standings)}, "
                f"matches={len(self.matches)})")


class QualifiedTeam:
    def __init__(self, team, group, position, pts=0, gd=0, gf=0):
        self.team = team
        self.group = group
        self.position = position
        self.pts = pts
        self.gd = gd
        self.gf = gf

    def to_dict(self):
        return {
            'team': self.team,
            'group': self.group,
            'position': self.position,
            'pts': self.pts,
            'gd': self.gd,
            'gf': self.gf,
        }

    def __eq__(self, other):
        if not isinstance(other, QualifiedTeam):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"QualifiedTeam(team={self.team}, group={self.group}, position={self.position}, "
                f"pts={self.pts}, gd={self.gd}, gf={self.gf})")


class KnockoutMatch:
    def __init__(self, home, away, match_name, home_score=SCORE_SENTINEL, away_score=SCORE_SENTINEL,
                 home_group='', away_group=''):
        self.home = home
        self.away = away
        self.home_group = home_group
        self.away_group = away_group
        self.home_score = home_score
        self.away_score = away_score
        self.match_name = match_name

    @property
    def is_played(self):
        return is_score(self.home_score) and is_score(self.away_score)

    def to_dict(self):
        return {
            'home': self.home,
            'away': self.away,
            'home_group': self.home_group,
            'away_group': self.away_group,
            'home_score': self.home_score,
            'away_score': self.away_score,
            'match_name': self.match_name,
        }

    def __eq__(self, other):
        if not isinstance(other, KnockoutMatch):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"KnockoutMatch({self.match_name}: {self.home} {self.home_score} - "
                f"{self.away_score} {self.away})")


class PlayoffsResult:
    kind = 'playoffs'

    def __init__(self, name='Knockout Stage', qualified_teams=None, semi_finals=None,
                 final=None, third_place=None, generated=False, warnings=None):
        self.name = name
        self.qualified_teams: List[QualifiedTeam] = qualified_teams if qualified_teams else []
        self.semi_finals: List[KnockoutMatch] = semi_finals if semi_finals else []
        self.final: Optional[KnockoutMatch] = final
        self.third_place: Optional[KnockoutMatch] = third_place
        self.generated = generated
        self.warnings: List[str] = warnings if warnings else []

    def to_dict(self):
        return {
            'kind': self.kind,
            'name': self.name,
            'qualified_teams': [t.to_dict() for t in self.qualified_teams],
            'semi_finals': [m.to_dict() for m in self.semi_finals],
            'final': self.final.to_dict() if self.final else None,
            'third_place': self.third_place.to_dict() if self.third_place else None,
            'generated': self.generated,
            'warnings': list(self.warnings),
        }

    def __repr__(self):
        return (f"PlayoffsResult(qualified={len(self.qualified_teams)}, "
                f"semi_finals={len(self.semi_finals)}, final={self.final is not None}, "
                f"third_place={self.third_place is not None})")


class TournamentModel:
    """Parsed tabs keyed by tab identifier, in sheet order.

    Group tabs map to GroupResult; the knockout tab lives under 'playoffs'.
    """

    PLAYOFFS_KEY = 'playoffs'

    def __init__(self, tabs=None):
        self._tabs: Dict[str, Union[GroupResult, PlayoffsResult]] = dict(tabs) if tabs else {}

    def __getitem__(self, key):
        return self._tabs[key]

    def __contains__(self, key):
        return key in self._tabs

    def __iter__(self):
        return iter(self._tabs)

    def __len__(self):
        return len(self._tabs)

    def get(self, key, default=None):
        return self._tabs.get(key, default)

    def keys(self):
        return self._tabs.keys()

    def items(self):
        return self._tabs.items()

    @property
    def groups(self) -> Dict[str, GroupResult]:
        return {key: tab for key, tab in self._tabs.items() if tab.kind == 'group'}

    @property
    def playoffs(self) -> Optional[PlayoffsResult]:
        return self._tabs.get(self.PLAYOFFS_KEY)

    def to_dict(self):
        return {key: tab.to_dict() for key, tab in self._tabs.items()}

    def __repr__(self):
        return f"TournamentModel(tabs={list(self._tabs)})"


class SheetRole:
    """How a workbook sheet is handled: 'group', 'playoffs' or 'skip'."""

    def __init__(self, kind, key, display_name=''):
        self.kind = kind
        self.key = key
        self.display_name = display_name

    def __eq__(self, other):
        if not isinstance(other, SheetRole):
            return NotImplemented
        return (self.kind, self.key, self.display_name) == (other.kind, other.key, other.display_name)

    def __repr__(self):
        return f"SheetRole(kind={self.kind}, key={self.key}, display_name={self.display_name})"


class Workbook:
    """Decoded spreadsheet: ordered sheet names and string cell grids."""

    def __init__(self, sheets=None):
        self._sheets: Dict[str, List[List[str]]] = dict(sheets) if sheets else {}

    @property
    def sheet_names(self) -> List[str]:
        return list(self._sheets)

    def rows(self, sheet_name) -> List[List[str]]:
        return self._sheets.get(sheet_name, [])

    def __repr__(self):
        return f"Workbook(sheets={self.sheet_names})"
