"""Standalone test execution used by the command line"""
from typing import Any, Dict, List

from stepwright.core.browser_manager import BrowserManager, save_artifact
from stepwright.executor.runner import Runner, ScenarioCase
from stepwright.executor.scenario_executor import Attachment, ScenarioResult
from stepwright.utils.logger import setup_logger

logger = setup_logger(__name__)


class TestExecutor:
    """Runs collected scenarios one by one, each in a fresh browser page"""

    __test__ = False

    def __init__(self, runner: Runner, browser_manager: BrowserManager,
                 screenshots_dir: str = 'reports/screenshots'):
        self.runner = runner
        self.browser_manager = browser_manager
        self.screenshots_dir = screenshots_dir
        self.results: List[Dict[str, Any]] = []

    def execute_suites(self, cases: List[ScenarioCase]) -> List[Dict[str, Any]]:
        """Execute all scenarios sequentially"""
        for case in cases:
            self.results.append(self._execute_scenario(case))
        return self.results

    def _execute_scenario(self, case: ScenarioCase) -> Dict[str, Any]:
        """Execute a single scenario"""
        scenario_result = {
            'feature': case.feature.name,
            'scenario': case.name,
            'tags': list(case.scenario.tags),
            'status': 'passed',
            'steps': 0,
            'error': None,
            'duration': 0,
            'screenshots': []
        }

        def attach(attachment: Attachment):
            path = save_artifact(
                self.screenshots_dir,
                f"{case.feature.name}_{case.name}_failed",
                attachment.body
            )
            scenario_result['screenshots'].append(path)
            logger.info(f"Saved {attachment.name}: {path}")

        result = ScenarioResult(name=case.name)
        page = self.browser_manager.start()
        try:
            self.runner.run_case(case, page, attach=attach, result=result)
        except Exception as e:
            logger.error(f"Scenario execution failed: {str(e)}")
            scenario_result['status'] = 'failed'
            scenario_result['error'] = str(e)
        finally:
            # Stop browser
            self.browser_manager.stop()

        scenario_result['steps'] = result.steps_run
        scenario_result['duration'] = result.duration
        if result.failed_step is not None:
            scenario_result['failed_step'] = result.failed_step.raw_text
        return scenario_result
