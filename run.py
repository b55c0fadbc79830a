#!/usr/bin/env python3
"""
stepwright - Gherkin feature runner for Playwright
Main entry point for executing, listing and inspecting BDD scenarios
"""

import sys
from typing import Optional, Sequence

import click
from colorama import Fore, Style
from dotenv import load_dotenv

from stepwright import __version__
from stepwright.core.browser_manager import BrowserManager
from stepwright.core.config_manager import ConfigManager
from stepwright.core.registry import default_registry, load_step_modules
from stepwright.executor.runner import Runner
from stepwright.executor.test_executor import TestExecutor
from stepwright.parser.feature_parser import FeatureParser
from stepwright.parser.tag_filter import TagFilter
from stepwright.utils.logger import set_log_level, setup_logger

# Initialize logger
logger = setup_logger(__name__)

config_option = click.option('--config', '-c', default='config/config.yaml', help='Path to config file')
env_option = click.option('--env', '-e', default='dev', help='Environment to run tests (dev/staging/prod)')
steps_option = click.option('--steps', '-s', multiple=True,
                            help='Step module (dotted name or .py path); repeatable')
log_level_option = click.option('--log-level', default=None, help='DEBUG/INFO/WARNING/ERROR')


def _load(config: str, env: str, log_level: Optional[str], steps: Sequence[str]) -> dict:
    load_dotenv()
    config_data = ConfigManager(config, env).load_config()
    set_log_level(log_level or config_data['logging'].get('level'))
    load_step_modules(list(config_data['steps'].get('modules') or []) + list(steps))
    return config_data


@click.group()
@click.version_option(__version__, prog_name='stepwright')
def main():
    """stepwright - execute Gherkin feature files against Playwright pages"""


@main.command()
@click.option('--features', '-f', default=None, help='Glob pattern or directory of feature files')
@click.option('--tags', '-t', multiple=True, help='Tag filter, e.g. "smoke+critical,nightly"; repeatable')
@click.option('--exclude-tag', default=None, help='Tag that always skips a scenario')
@click.option('--browser', '-b', default=None, help='Browser to use (chromium/firefox/webkit)')
@click.option('--headless/--headed', default=None, help='Run the browser headless')
@click.option('--slow-mo', default=None, type=int, help='Slow down execution by milliseconds')
@config_option
@env_option
@steps_option
@log_level_option
def run(features, tags, exclude_tag, browser, headless, slow_mo, config, env, steps, log_level):
    """
    Run scenarios and exit non-zero when any of them fails

    Examples:
        # Run all tests in dev environment
        python run.py run --env dev -s steps/login_steps.py

        # Run specific tagged scenarios
        python run.py run --tags @smoke+@critical --tags @nightly
    """
    try:
        config_data = _load(config, env, log_level, steps)
        run_config = config_data['run']
        browser_options = dict(config_data['browser'])
        if browser:
            browser_options['type'] = browser
        if headless is not None:
            browser_options['headless'] = headless
        if slow_mo is not None:
            browser_options['slow_mo'] = slow_mo

        logger.info(f"Starting stepwright v{__version__}")
        logger.info(f"Environment: {env}")
        logger.info(f"Browser: {browser_options['type']}")

        runner = Runner(
            default_registry,
            tags=list(tags) or run_config.get('tags'),
            exclude_tag=exclude_tag or run_config.get('exclude_tag'),
            tags_env_var=run_config.get('tags_env_var', 'TAGS')
        )
        cases = runner.collect(features or run_config['features'])

        if not cases:
            logger.warning("No test scenarios found matching the criteria")
            return

        executor = TestExecutor(
            runner,
            BrowserManager(browser_options),
            screenshots_dir=config_data['reports']['screenshots_dir']
        )
        results = executor.execute_suites(cases)
        _print_summary(results)

        # Exit with appropriate code
        failed_count = sum(1 for r in results if r['status'] == 'failed')
        if failed_count > 0:
            logger.error(f"Tests completed with {failed_count} failures")
            sys.exit(1)
        logger.info("All tests passed successfully!")

    except Exception as e:
        logger.error(f"Execution failed: {str(e)}")
        sys.exit(1)


@main.command(name='list')
@click.option('--features', '-f', default=None, help='Glob pattern or directory of feature files')
@click.option('--tags', '-t', multiple=True, help='Tag filter expression; repeatable')
@config_option
@env_option
@log_level_option
def list_scenarios(features, tags, config, env, log_level):
    """Print the features, scenarios and steps that would run"""
    load_dotenv()
    config_data = ConfigManager(config, env).load_config()
    set_log_level(log_level or config_data['logging'].get('level'))
    run_config = config_data['run']
    tag_filter = TagFilter.from_options(
        list(tags) or run_config.get('tags'),
        run_config.get('exclude_tag'),
        run_config.get('tags_env_var', 'TAGS')
    )

    for feature in FeatureParser(features or run_config['features']).parse_features(tag_filter):
        click.echo(f"\n{Style.BRIGHT}Feature: {feature.name}{Style.RESET_ALL}  {' '.join(feature.tags)}")
        click.echo(f"  file: {feature.file_path}")
        for scenario in feature.scenarios:
            click.echo(f"\n  {scenario.keyword}: {scenario.name}  {Fore.CYAN}{' '.join(scenario.tags)}{Style.RESET_ALL}")
            for parsed_step in feature.steps_for(scenario):
                click.echo(f"    {parsed_step.raw_text}")
                for row in parsed_step.data_table or []:
                    click.echo(f"      | {' | '.join(row)} |")
                if parsed_step.text_block is not None:
                    click.echo('      """')
                    for line in parsed_step.text_block.splitlines():
                        click.echo(f"      {line}")
                    click.echo('      """')


@main.command(name='steps')
@config_option
@env_option
@steps_option
@log_level_option
def list_steps(config, env, steps, log_level):
    """Print every registered step definition in match order"""
    _load(config, env, log_level, steps)
    for index, definition in enumerate(default_registry, 1):
        click.echo(f"{index:4}. {definition.describe()}  {Style.DIM}{definition.location}{Style.RESET_ALL}")
    click.echo(f"\n{len(default_registry)} step definitions")


def _print_summary(results):
    passed = sum(1 for r in results if r['status'] == 'passed')
    failed = len(results) - passed
    click.echo('')
    for result in results:
        color = Fore.GREEN if result['status'] == 'passed' else Fore.RED
        click.echo(f"{color}{result['status'].upper():7}{Style.RESET_ALL} "
                   f"{result['feature']} :: {result['scenario']} ({result['duration']:.2f}s)")
        if result['error']:
            click.echo(f"        {result['error']}")
        for path in result['screenshots']:
            click.echo(f"        screenshot: {path}")
    click.echo(f"\n{passed} passed, {failed} failed")


if __name__ == '__main__':
    main()
