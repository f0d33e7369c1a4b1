"""
CLI testing, dawg.
"""
import json
from pathlib import Path

from click.testing import CliRunner

from ntpeek.cli import cli


def test_search_ranks_args():
    result = CliRunner().invoke(
        cli,
        ['search', 'ab', 'zzz', 'xaybzc', 'abc'],
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ['abc', 'xaybzc']


def test_search_reads_stdin_with_scores():
    result = CliRunner().invoke(
        cli,
        ['search', '--scores', 'spd'],
        input='/drive/speed\n\n/arm/angle\n',
    )
    assert result.exit_code == 0, result.output
    [line] = result.stdout.splitlines()
    score, topic = line.split('\t')
    assert topic == '/drive/speed'
    assert int(score) > 0


def test_config_dump(tmpconfdir: Path):
    (tmpconfdir / 'conf.toml').write_text(
        '[feed]\nnamespace = "/robot/"\n'
    )
    result = CliRunner().invoke(
        cli,
        ['--configdir', str(tmpconfdir), 'config', '--no-color'],
    )
    assert result.exit_code == 0, result.output
    dumped = json.loads(result.stdout)
    assert dumped['feed']['namespace'] == '/robot/'
    assert dumped['ui']['grid_columns'] == 4


def test_config_dump_bad_settings(tmpconfdir: Path):
    (tmpconfdir / 'conf.toml').write_text(
        '[ui]\ntick_period = "fast"\n'
    )
    result = CliRunner().invoke(
        cli,
        ['--configdir', str(tmpconfdir), 'config'],
    )
    assert result.exit_code != 0
    assert 'Invalid settings' in result.output
