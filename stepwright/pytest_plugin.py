"""
pytest integration

Enable it from a conftest.py::

    pytest_plugins = ["stepwright.pytest_plugin"]

then turn feature files into tests from any test module::

    import steps.login_steps  # registers the steps
    from stepwright.pytest_plugin import run_tests

    test_login = run_tests("features/login/*.feature")
"""

import os
from typing import Optional, Sequence, Union

import pytest

from stepwright.core.browser_manager import BrowserManager, save_artifact
from stepwright.core.config_manager import ConfigManager
from stepwright.core.registry import StepRegistry
from stepwright.executor.runner import Runner, ScenarioCase
from stepwright.executor.scenario_executor import Attachment
from stepwright.parser.tag_filter import DEFAULT_EXCLUDE_TAG
from stepwright.utils.logger import setup_logger

logger = setup_logger(__name__)

ATTACHMENTS_ATTR = '_stepwright_attachments'


def run_tests(feature_glob: str, tags: Optional[Union[str, Sequence[str]]] = None,
              registry: Optional[StepRegistry] = None,
              exclude_tag: Optional[str] = DEFAULT_EXCLUDE_TAG):
    """
    Build a test function with one parametrized case per admitted scenario.

    The tag filter comes from ``tags`` or, when omitted, the TAGS environment variable.
    """
    runner = Runner(registry, tags=tags, exclude_tag=exclude_tag)
    cases = runner.collect(feature_glob)

    @pytest.mark.parametrize(
        'scenario_case',
        [pytest.param(case, id=case.full_name) for case in cases]
    )
    def test_scenario(scenario_case: ScenarioCase, stepwright_page, stepwright_config, request):
        screenshots_dir = stepwright_config['reports']['screenshots_dir']

        def attach(attachment: Attachment):
            path = save_artifact(screenshots_dir, f"{request.node.name}_{attachment.name}", attachment.body)
            request.node.user_properties.append((attachment.name, path))
            getattr(request.node, ATTACHMENTS_ATTR).append(path)

        setattr(request.node, ATTACHMENTS_ATTR, [])
        runner.run_case(scenario_case, stepwright_page, attach=attach)

    test_scenario.stepwright_runner = runner
    return test_scenario


@pytest.fixture(scope='session')
def stepwright_config():
    """Configuration from STEPWRIGHT_CONFIG / STEPWRIGHT_ENV"""
    config_path = os.environ.get('STEPWRIGHT_CONFIG', 'config/config.yaml')
    environment = os.environ.get('STEPWRIGHT_ENV', 'dev')
    return ConfigManager(config_path, environment).load_config()


@pytest.fixture
def stepwright_page(stepwright_config):
    """A fresh browser page for one scenario"""
    browser_manager = BrowserManager(stepwright_config['browser'])
    page = browser_manager.start()
    try:
        yield page
    finally:
        browser_manager.stop()


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    paths = getattr(item, ATTACHMENTS_ATTR, None)
    if report.when == 'call' and paths:
        report.sections.append(('stepwright attachments', '\n'.join(paths)))
