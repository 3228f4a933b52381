"""
Tests for the command line interface
"""
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from aws_tag_sweeper.cli import cli
from aws_tag_sweeper.exceptions import RegionEnumerationError
from aws_tag_sweeper.tagging import TagMode


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch('aws_tag_sweeper.cli.setup_logging') as mock_setup:
        yield mock_setup


@patch('aws_tag_sweeper.cli.TaggingOrchestrator')
def test_run_exits_zero(mock_orchestrator, runner):
    result = runner.invoke(cli, ['run'])

    assert result.exit_code == 0
    mock_orchestrator.return_value.run.assert_called_once()


@patch('aws_tag_sweeper.cli.TaggingOrchestrator')
def test_run_exits_one_on_fatal_error(mock_orchestrator, runner):
    mock_orchestrator.return_value.run.side_effect = RegionEnumerationError('denied')

    result = runner.invoke(cli, ['run'])

    assert result.exit_code == 1


@patch('aws_tag_sweeper.cli.TaggingOrchestrator')
def test_run_options_override_config(mock_orchestrator, runner):
    result = runner.invoke(cli, [
        'run', '--mode', 'selective', '-r', 'eu-west-1', '-r', 'us-west-2',
        '--dry-run', '--batch-size', '2', '--delay', '0.5'
    ])

    assert result.exit_code == 0
    config = mock_orchestrator.call_args.args[0]
    assert config.mode is TagMode.SELECTIVE
    assert config.regions == ['eu-west-1', 'us-west-2']
    assert config.dry_run is True
    assert config.region_batch_size == 2
    assert config.inter_operation_delay == 0.5


@patch('aws_tag_sweeper.cli.TaggingOrchestrator')
def test_run_uses_config_file(mock_orchestrator, runner, tmp_path):
    config_file = tmp_path / 'config.yaml'
    config_file.write_text('mode: selective\ndesired_tags:\n  Owner: ops\n')

    result = runner.invoke(cli, ['--config', str(config_file), 'run'])

    assert result.exit_code == 0
    config = mock_orchestrator.call_args.args[0]
    assert config.mode is TagMode.SELECTIVE
    assert dict(config.desired_tags) == {'Owner': 'ops'}
    assert config.dry_run is False


def test_missing_config_file_exits_one(runner, tmp_path):
    result = runner.invoke(cli, ['--config', str(tmp_path / 'absent.yaml'), 'run'])

    assert result.exit_code == 1
    assert 'Configuration error' in result.output


def test_log_options_reach_setup(runner, no_logging_setup):
    with patch('aws_tag_sweeper.cli.TaggingOrchestrator'):
        runner.invoke(cli, ['--log-level', 'debug', '--log-format', 'json', 'run'])

    no_logging_setup.assert_called_once_with(log_level='DEBUG', log_file=None, log_format='json')


@patch('aws_tag_sweeper.cli.RegionEnumerator')
def test_regions_lists_names(mock_enumerator, runner):
    mock_enumerator.return_value.list_regions.return_value = ['us-east-1', 'eu-west-1']

    result = runner.invoke(cli, ['regions'])

    assert result.exit_code == 0
    assert result.output.split() == ['us-east-1', 'eu-west-1']


@patch('aws_tag_sweeper.cli.RegionEnumerator')
def test_regions_failure_exits_one(mock_enumerator, runner):
    mock_enumerator.return_value.list_regions.side_effect = RegionEnumerationError('denied')

    result = runner.invoke(cli, ['regions'])

    assert result.exit_code == 1
    assert 'denied' in result.output
