"""
Scenario executor
Runs the steps of one scenario in order against a browser page
"""

import inspect
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence

from stepwright.core.context import ScenarioContext
from stepwright.core.exceptions import StepDefinitionError, UndefinedStepError
from stepwright.executor.step_matcher import StepMatcher
from stepwright.parser.step_parser import ParsedStep
from stepwright.utils.logger import setup_logger

logger = setup_logger(__name__)

FAILURE_SCREENSHOT = 'failure-screenshot'


class ScenarioStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class Attachment:
    name: str
    body: bytes
    content_type: str


AttachCallback = Callable[[Attachment], Any]


@dataclass
class ScenarioResult:
    name: str
    status: ScenarioStatus = ScenarioStatus.PENDING
    steps_run: int = 0
    error: Optional[BaseException] = None
    failed_step: Optional[ParsedStep] = None
    attachments: List[Attachment] = field(default_factory=list)
    duration: float = 0.0

    @property
    def passed(self) -> bool:
        return self.status == ScenarioStatus.PASSED


class ScenarioExecutor:
    """Executes steps strictly one after another; the first failure ends the scenario"""

    def __init__(self, matcher: StepMatcher):
        self.matcher = matcher

    def run(self, name: str, steps: Sequence[ParsedStep], session: Any,
            context: Optional[ScenarioContext] = None,
            attach: Optional[AttachCallback] = None,
            result: Optional[ScenarioResult] = None) -> ScenarioResult:
        """
        Run the steps against the session.

        Args:
            name: Scenario name, for logs
            steps: Background steps followed by scenario steps
            session: Page object handed to every handler unchanged
            context: Per-scenario state; a fresh one is created when omitted
            attach: Receives diagnostic artifacts captured on failure
            result: Filled in while running, so callers keep it when this raises

        Returns:
            The passed result. Failures are re-raised after the result is updated.
        """
        context = context if context is not None else ScenarioContext()
        result = result if result is not None else ScenarioResult(name=name)
        result.status = ScenarioStatus.RUNNING
        started = time.monotonic()
        logger.info(f"Scenario: {name}")

        try:
            for parsed_step in steps:
                match = self.matcher.match(parsed_step.clean_text)
                if match is None:
                    result.failed_step = parsed_step
                    raise UndefinedStepError(parsed_step.clean_text)

                args = list(match.args)
                if parsed_step.data_table:
                    args.append(parsed_step.data_table)
                if parsed_step.text_block:
                    args.append(parsed_step.text_block)

                logger.info(f"   executing: {parsed_step.raw_text}")
                try:
                    outcome = match.handler(session, context, *args)
                    if inspect.isawaitable(outcome):
                        if hasattr(outcome, 'close'):
                            outcome.close()
                        raise StepDefinitionError(
                            f"Step handler for '{parsed_step.clean_text}' returned an awaitable; "
                            f"step handlers must be synchronous"
                        )
                except BaseException as e:
                    result.failed_step = parsed_step
                    logger.error(f"Failed at step: \"{parsed_step.raw_text}\" ({type(e).__name__}: {e})")
                    self._capture_failure(session, result, attach)
                    raise
                result.steps_run += 1

        except BaseException as e:
            result.status = ScenarioStatus.FAILED
            result.error = e
            raise
        finally:
            result.duration = time.monotonic() - started

        result.status = ScenarioStatus.PASSED
        return result

    def _capture_failure(self, session: Any, result: ScenarioResult,
                         attach: Optional[AttachCallback]) -> None:
        """Full-page screenshot of the session, attached to the result and the host report"""
        try:
            body = session.screenshot(full_page=True, type="png")
        except Exception as e:
            logger.warning(f"Could not capture failure screenshot: {e}")
            return

        attachment = Attachment(name=FAILURE_SCREENSHOT, body=body, content_type="image/png")
        result.attachments.append(attachment)
        if attach is not None:
            try:
                attach(attachment)
            except Exception as e:
                logger.warning(f"Could not attach failure screenshot: {e}")
