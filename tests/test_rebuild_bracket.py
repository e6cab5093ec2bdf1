"""
Tests for the rebuild_bracket command line.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.models import Player
from bracket.storage import load_results, save_results
from rebuild_bracket import main


@pytest.fixture
def data_files(tmp_path, players, write_players):
    players_path = str(tmp_path / 'players.yaml')
    results_path = str(tmp_path / 'results.yaml')
    write_players(players_path, players)
    return players_path, results_path


class TestShow:
    """Tests for the show command."""

    def test_show_full_bracket(self, data_files, capsys):
        players_path, _ = data_files
        assert main(['show', players_path]) == 0
        out = capsys.readouterr().out
        assert "# wb (places 1-32)" in out
        assert "## Round 1" in out
        assert "wb-r1-m1: [1] Player 01 vs [32] Player 32  [-] pending" in out
        assert "wb-r2-m1: Winner of wb-r1-m1 vs Winner of wb-r1-m2  [-] scheduled" in out
        assert "# p31 (places 31-32)" in out

    def test_show_one_branch(self, data_files, capsys):
        players_path, _ = data_files
        assert main(['show', players_path, '--bracket', 'p9']) == 0
        out = capsys.readouterr().out
        assert "# p9 (places 9-16)" in out
        assert "wb-r1-m1" not in out

    def test_show_first_round_seeds_with_byes(self, tmp_path, players, write_players, capsys):
        players_path = str(tmp_path / 'players.yaml')
        write_players(players_path, players[:31])
        assert main(['show', players_path, '--bracket', 'wb']) == 0
        out = capsys.readouterr().out
        assert "wb-r1-m1: [1] Player 01 vs [32] BYE  [1-0] finished" in out
        assert "wb-r2-m1: Player 01 vs Winner of wb-r1-m2  [-] scheduled" in out

    def test_show_with_missing_results_file(self, data_files, capsys):
        players_path, results_path = data_files
        assert main(['show', players_path, '--results', results_path]) == 0


class TestRecordAndClear:
    """Tests for the record and clear commands."""

    def test_record_saves_result(self, data_files, capsys):
        players_path, results_path = data_files
        assert main(['record', players_path, results_path, 'wb-r1-m1', '3', '0']) == 0
        assert "wb-r1-m1: [3-0] finished" in capsys.readouterr().out
        results = load_results(results_path)
        assert results['wb-r1-m1']['winner_id'] == 'pl-01'

        main(['show', players_path, '--results', results_path, '--bracket', 'p17'])
        assert "p17-r1-m1: Player 32 vs Loser of wb-r1-m2" in capsys.readouterr().out

    def test_record_with_winner(self, data_files):
        players_path, results_path = data_files
        assert main(['record', players_path, results_path, 'wb-r1-m1', '1', '0',
                     '--winner', 'pl-32']) == 0
        assert load_results(results_path)['wb-r1-m1']['winner_id'] == 'pl-32'

    def test_record_unready_match(self, data_files, capsys):
        players_path, results_path = data_files
        assert main(['record', players_path, results_path, 'wb-r2-m1', '3', '0']) == 1
        assert "not ready" in capsys.readouterr().err

    def test_clear(self, data_files, capsys):
        players_path, results_path = data_files
        main(['record', players_path, results_path, 'wb-r1-m1', '3', '0'])
        main(['record', players_path, results_path, 'wb-r1-m2', '3', '1'])
        assert main(['clear', players_path, results_path, 'wb-r1-m1']) == 0
        assert "wb-r1-m1: cleared" in capsys.readouterr().out
        assert list(load_results(results_path)) == ['wb-r1-m2']


class TestStandings:
    """Tests for the standings command."""

    def test_standings_before_play(self, data_files, capsys):
        players_path, _ = data_files
        assert main(['standings', players_path]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 32
        assert lines[0] == " 1. -"

    def test_standings_after_final(self, data_files, play_out, players, capsys):
        players_path, results_path = data_files
        _, results = play_out(players, only=lambda m: m.bracket == 'wb')
        save_results(results_path, results)
        assert main(['standings', players_path, '--results', results_path]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == " 1. Player 01"
        assert lines[1] == " 2. Player 02"
        assert lines[2] == " 3. -"


class TestErrors:
    """Tests for exit codes."""

    def test_too_many_players(self, tmp_path, write_players, capsys):
        players_path = str(tmp_path / 'players.yaml')
        write_players(players_path, [Player(id=f"x{i}") for i in range(33)])
        assert main(['show', players_path]) == 1
        assert "at most 32" in capsys.readouterr().err

    def test_malformed_results(self, data_files, capsys):
        players_path, results_path = data_files
        with open(results_path, 'w') as f:
            f.write("wb-r1-m1: [unclosed\n")
        assert main(['show', players_path, '--results', results_path]) == 1
        assert "Failed to parse" in capsys.readouterr().err
