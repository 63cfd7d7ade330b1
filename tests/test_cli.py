"""Tests for the command line interface."""

import json
import logging

import pandas as pd
import pytest
from click.testing import CliRunner

from main import cli


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def runner():
    return CliRunner()


class TestCli:
    """Test CLI commands against the bundled mock league."""
    
    def test_league(self, runner):
        result = runner.invoke(cli, ['league'])
        
        assert result.exit_code == 0
        assert "[1] Gridiron Gurus" in result.output
        assert "Christian McCaffrey" in result.output
    
    def test_value(self, runner):
        result = runner.invoke(cli, ['value', 'Josh Allen', '-p', 'QB'])
        
        assert result.exit_code == 0
        assert "Josh Allen (QB): 60 [fallback]" in result.output
    
    def test_value_with_names_file(self, runner, tmp_path):
        names_file = tmp_path / "names.json"
        names_file.write_text(json.dumps({"elite": ["Jalen Hurts"]}))
        
        result = runner.invoke(cli, ['value', 'Jalen Hurts', '-p', 'QB',
                                     '--names-file', str(names_file)])
        
        assert result.exit_code == 0
        assert "Jalen Hurts (QB): 60 [fallback]" in result.output
    
    def test_insights(self, runner):
        result = runner.invoke(cli, ['insights', '1'])
        
        assert result.exit_code == 0
        assert "Gridiron Gurus (team 1) - values: fallback" in result.output
        assert "Total value: 649" in result.output
        assert "Strengths:   RB, WR" in result.output
        assert "Weaknesses:  DST, K" in result.output
    
    def test_insights_csv_output(self, runner, tmp_path):
        output = tmp_path / "players.csv"
        result = runner.invoke(cli, ['insights', '1', '--output', str(output)])
        
        assert result.exit_code == 0
        players = pd.read_csv(output)
        assert len(players) == 10
        assert players.iloc[0]['value'] == 100
        assert set(players.columns) >= {'playerId', 'name', 'position', 'value', 'source'}
    
    def test_insights_json_with_csv_output(self, runner, tmp_path):
        """Test --json output stays parseable when a CSV is also written."""
        output = tmp_path / "players.csv"
        result = runner.invoke(cli, ['insights', '1', '--json', '--output', str(output)])
        
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['teamId'] == 1
        assert data['evaluation']['strengths'] == ["RB", "WR"]
        assert output.exists()
    
    def test_insights_unknown_team(self, runner):
        result = runner.invoke(cli, ['insights', '99'])
        
        assert result.exit_code != 0
        assert "Invalid team id" in result.output
    
    def test_trade(self, runner):
        result = runner.invoke(cli, ['trade', '-f', '1', '-t', '2', '-g', '102', '-r', '204'])
        
        assert result.exit_code == 0
        assert "Gridiron Gurus sends: Christian McCaffrey (100)" in result.output
        assert "Verdict: Fair (delta -13, threshold 20)" in result.output
        assert "  - Starter RB weakens (-14)." in result.output
    
    def test_trade_json(self, runner):
        result = runner.invoke(cli, ['trade', '-f', '3', '-t', '1', '-g', '303', '-r', '102', '--json'])
        
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['valueDelta'] == 28
        assert data['verdict'] == "User gains value"
        assert data['fromTeam']['name'] == "End Zone Elite"
    
    def test_trade_invalid_team(self, runner):
        result = runner.invoke(cli, ['trade', '-f', '1', '-t', '99', '-g', '102'])
        
        assert result.exit_code != 0
        assert "Invalid team ids for trade analysis" in result.output
    
    def test_missing_league_file(self, runner, tmp_path):
        result = runner.invoke(cli, ['league', '--league', str(tmp_path / 'none.json')])
        
        assert result.exit_code != 0
        assert "League file not found" in result.output
