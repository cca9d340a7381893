"""
Tests for the command-line interface.
"""

import pytest

from ..cli import main


class TestClassify:
    def test_straight_flush(self, capsys):
        main(["classify", "2:Iron", "3:Iron", "4:Iron", "5:Iron", "A:Iron"])
        out = capsys.readouterr().out
        assert "Hand: Straight Flush (level 8)" in out
        assert "Primal Current" in out

    def test_incomplete_card_is_skipped(self, capsys):
        main(["classify", "9:Iron", "9:", "9:Bone"])
        out = capsys.readouterr().out
        assert "Skipping incomplete card: 9:" in out
        assert "Hand: Pair" in out

    def test_too_many_cards(self):
        with pytest.raises(SystemExit):
            main(["classify", "2:Iron", "3:Iron", "4:Iron", "5:Iron", "6:Iron", "7:Iron"])


class TestResolve:
    def test_resolve_table(self, capsys):
        main(["resolve", "--item", "7:Iron", "--item", "7:Bone"])
        out = capsys.readouterr().out
        assert "Human Warrior (Iron)" in out
        assert "Aligned items: 1" in out
        assert "Hand: Pair (level 1)" in out

    def test_unknown_race(self):
        with pytest.raises(SystemExit):
            main(["resolve", "--race", "Lich"])


class TestFormula:
    def test_value(self, capsys):
        main(["formula", "gold / 2 + strength + agility", "--gold", "10"])
        # 5 + 6 + 3
        assert capsys.readouterr().out.strip() == "14"

    def test_syntax_error_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["formula", "gold = 3"])
        assert exc_info.value.code == 1
        assert "syntax" in capsys.readouterr().out

    def test_selections_set_starting_gold(self, capsys):
        main(["formula", "gold", "--race", "Goblin", "--class", "Rogue", "--affinity", "Shadow"])
        assert capsys.readouterr().out.strip() == "35"
