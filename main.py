"""Main entry point for the Fantasy Football Trade Analyzer."""

import asyncio

import click
import pandas as pd

from trade_analyzer import (
    Player,
    PlayerValuator,
    TradeAnalyzerError,
    TradeEvaluator,
    ValuationConfig,
    ValueCache,
    ValueSource,
)
from trade_analyzer.data.league_loader import load_league_or_mock
from trade_analyzer.data.sleeper_values import SleeperValueOracle, current_season
from trade_analyzer.utils.logging_config import setup_logging


VALUATION_OPTIONS = [
    click.option('--names-file', type=click.Path(exists=True, dir_okay=False),
                 help='JSON file with elite/breakout/risk name lists'),
    click.option('--external/--heuristic', default=False,
                 help='Use Sleeper season points when available (default: heuristic only)'),
    click.option('--season', '-y', type=int,
                 help='Season for external values (defaults to current)'),
    click.option('--scoring', '-s', default='ppr',
                 type=click.Choice(['standard', 'ppr', 'half_ppr']),
                 help='Scoring type for external values'),
    click.option('--timeout', type=float, default=10.0, show_default=True,
                 help='Seconds to wait for one external lookup'),
]


def valuation_options(f):
    """Options shared by every command that values players."""
    for option in reversed(VALUATION_OPTIONS):
        f = option(f)
    return f


def build_evaluator(names_file, external, season, scoring, timeout) -> TradeEvaluator:
    """Wire configuration and the optional external value source."""
    config = ValuationConfig.with_names_file(names_file) if names_file else ValuationConfig.default()
    oracle = None
    if external:
        oracle = SleeperValueOracle(season=season or current_season(), scoring_type=scoring)
    source = ValueSource(
        oracle=oracle,
        valuator=PlayerValuator(config),
        cache=ValueCache(),
        timeout=timeout,
    )
    return TradeEvaluator(config=config, value_source=source)


def echo_evaluation(evaluation) -> None:
    click.echo(f"{'POS':4} {'STARTER':>7} {'DEPTH':>6} {'COUNT':>6}")
    for position, score in evaluation.scores.items():
        click.echo(f"{position:4} {score.starter_score:7d} {score.depth_score:6d} {score.count:6d}")
    click.echo(f"Total value: {evaluation.total_value}")
    click.echo(f"Strengths:   {', '.join(evaluation.strengths) or '-'}")
    click.echo(f"Weaknesses:  {', '.join(evaluation.weaknesses) or '-'}")


@click.group()
@click.option('--log-level', default='WARNING',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Set logging level')
@click.option('--log-file', type=click.Path(), help='Log file path')
def cli(log_level, log_file):
    """Fantasy Football Trade Analyzer CLI."""
    setup_logging(level=log_level, log_file=log_file)


@cli.command()
@click.option('--league', '-l', 'league_path', type=click.Path(),
              help='League JSON file (defaults to the bundled mock league)')
def league(league_path):
    """List teams and rosters in a league."""
    try:
        data = load_league_or_mock(league_path)
    except TradeAnalyzerError as e:
        raise click.ClickException(str(e))

    for team in data.teams:
        click.echo(f"[{team.team_id}] {team.name}")
        for p in team.roster:
            click.echo(f"    {p.player_id:>5} {p.position or '?':3} {p.name}")


@cli.command()
@click.argument('name')
@click.option('--position', '-p', type=click.Choice(['QB', 'RB', 'WR', 'TE', 'DST', 'K']),
              help='Player position')
@valuation_options
def value(name, position, names_file, external, season, scoring, timeout):
    """Value a single player by name."""
    evaluator = build_evaluator(names_file, external, season, scoring, timeout)
    player = Player(player_id=0, name=name, position=position)
    valued = asyncio.run(evaluator.value_source.resolve_value(player))
    click.echo(f"{valued.name} ({valued.position or '?'}): {valued.value} [{valued.source.value}]")


@cli.command()
@click.argument('team_id', type=int)
@click.option('--league', '-l', 'league_path', type=click.Path(),
              help='League JSON file (defaults to the bundled mock league)')
@click.option('--output', '-o', type=click.Path(),
              help='Write valued players to this CSV file')
@click.option('--json', 'as_json', is_flag=True, help='Print the full result as JSON')
@valuation_options
def insights(team_id, league_path, output, as_json, names_file, external, season, scoring, timeout):
    """Show roster strengths and weaknesses for one team."""
    evaluator = build_evaluator(names_file, external, season, scoring, timeout)
    try:
        data = load_league_or_mock(league_path)
        result = asyncio.run(evaluator.get_team_insights_async(data, team_id))
    except TradeAnalyzerError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(result.model_dump_json(by_alias=True, indent=2))
    else:
        click.echo(f"{result.name} (team {result.team_id}) - values: {result.valuation_source}")
        click.echo("=" * 40)
        echo_evaluation(result.evaluation)

    if output:
        players = pd.DataFrame(
            [p.model_dump(mode='json', by_alias=True) for p in result.evaluation.players]
        )
        players = players.sort_values('value', ascending=False)
        players.to_csv(output, index=False)
        if not as_json:
            click.echo(f"\nPlayers saved to {output}")


@cli.command()
@click.option('--from-team', '-f', type=int, required=True, help='Proposing team id')
@click.option('--to-team', '-t', type=int, required=True, help='Receiving team id')
@click.option('--give', '-g', type=int, multiple=True, help='Player id you send (repeatable)')
@click.option('--get', '-r', 'receive', type=int, multiple=True,
              help='Player id you receive (repeatable)')
@click.option('--league', '-l', 'league_path', type=click.Path(),
              help='League JSON file (defaults to the bundled mock league)')
@click.option('--json', 'as_json', is_flag=True, help='Print the full result as JSON')
@valuation_options
def trade(from_team, to_team, give, receive, league_path, as_json,
          names_file, external, season, scoring, timeout):
    """Judge whether a trade favors the proposing team."""
    evaluator = build_evaluator(names_file, external, season, scoring, timeout)
    try:
        data = load_league_or_mock(league_path)
        result = asyncio.run(evaluator.analyze_trade_async(
            data,
            from_team_id=from_team,
            to_team_id=to_team,
            offer_from_ids=list(give),
            offer_to_ids=list(receive),
        ))
    except TradeAnalyzerError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(result.model_dump_json(by_alias=True, indent=2))
        return

    sent = ", ".join(p.name for p in result.offer_from_players) or "nothing"
    received = ", ".join(p.name for p in result.offer_to_players) or "nothing"
    click.echo(f"{result.from_team.name} sends: {sent} ({result.offer_from_value})")
    click.echo(f"{result.to_team.name} sends: {received} ({result.offer_to_value})")
    click.echo("=" * 60)
    click.echo(f"Verdict: {result.verdict.value} (delta {result.value_delta:+d}, "
               f"threshold {result.threshold})")
    for note in result.rationale:
        click.echo(f"  - {note}")


if __name__ == '__main__':
    cli()
