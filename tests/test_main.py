"""
Tests for the console report.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import main
from conftest import grids_to_xlsx


@pytest.fixture
def workbook_file(tmp_path, tournament_workbook):
    sheets = {name: tournament_workbook.rows(name) for name in tournament_workbook.sheet_names}
    path = tmp_path / 'cup.xlsx'
    path.write_bytes(grids_to_xlsx(sheets))
    return str(path)


class TestMain:
    """Tests for the main() entry point."""

    def test_prints_groups_and_bracket(self, workbook_file, monkeypatch, capsys):
        monkeypatch.setattr(sys, 'argv', ['main.py', workbook_file])
        main.main()
        out = capsys.readouterr().out
        assert '# Group A' in out
        assert 'Lions 3 : 1 Tigers' in out
        assert '# Knockout Stage' in out
        assert 'Semi-Final 1: Lions - - - Eagles' in out
        assert 'Final: Winner SF1 - - - Winner SF2' in out

    def test_missing_file_exits(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, 'argv', ['main.py', str(tmp_path / 'missing.xlsx')])
        with pytest.raises(SystemExit) as exc:
            main.main()
        assert exc.value.code == 1
        assert 'Error:' in capsys.readouterr().err
