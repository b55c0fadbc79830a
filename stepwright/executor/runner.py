"""
Runner
Discovers feature files, applies the tag filter and runs each admitted
scenario through the scenario executor
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from stepwright.core.context import ScenarioContext
from stepwright.core.registry import StepRegistry, default_registry
from stepwright.executor.scenario_executor import AttachCallback, ScenarioExecutor, ScenarioResult
from stepwright.executor.step_matcher import StepMatcher
from stepwright.parser.feature_parser import Feature, FeatureParser, Scenario
from stepwright.parser.step_parser import ParsedStep
from stepwright.parser.tag_filter import DEFAULT_EXCLUDE_TAG, DEFAULT_TAGS_ENV_VAR, TagFilter
from stepwright.utils.logger import setup_logger

logger = setup_logger(__name__)

REGISTRY_DUMP_LIMIT = 10


@dataclass
class ScenarioCase:
    """One admitted scenario, i.e. one test case for the host harness"""
    feature: Feature
    scenario: Scenario

    @property
    def name(self) -> str:
        return self.scenario.name

    @property
    def full_name(self) -> str:
        tags = ' '.join(self.scenario.tags)
        return f"{self.scenario.name} {tags}" if tags else self.scenario.name

    @property
    def steps(self) -> List[ParsedStep]:
        return self.feature.steps_for(self.scenario)

    @property
    def file_path(self) -> str:
        return self.feature.file_path


class Runner:
    """Feature files in, one ScenarioCase per admitted scenario out"""

    def __init__(self, registry: Optional[StepRegistry] = None,
                 tags: Optional[Union[str, Sequence[str]]] = None,
                 exclude_tag: Optional[str] = DEFAULT_EXCLUDE_TAG,
                 tags_env_var: str = DEFAULT_TAGS_ENV_VAR):
        self.registry = registry if registry is not None else default_registry
        self.tag_filter = TagFilter.from_options(tags, exclude_tag, tags_env_var)
        self.matcher = StepMatcher(self.registry)
        self.executor = ScenarioExecutor(self.matcher)

    def collect(self, features: str) -> List[ScenarioCase]:
        """Parse the features matched by a glob (or directory) into test cases"""
        logger.debug(f"Collecting scenarios from {features} with {self.tag_filter}")
        parsed = FeatureParser(features).parse_features(self.tag_filter)

        cases = [ScenarioCase(feature, scenario) for feature in parsed for scenario in feature.scenarios]
        logger.info(f"Collected {len(cases)} scenarios from {len(parsed)} features")
        return cases

    def dump_registry(self) -> None:
        logger.debug(f"Step registry holds {len(self.registry)} definitions")
        if len(self.registry) <= REGISTRY_DUMP_LIMIT:
            for index, definition in enumerate(self.registry, 1):
                logger.debug(f"  {index}. {definition.describe()}")

    def run_case(self, case: ScenarioCase, session: Any,
                 attach: Optional[AttachCallback] = None,
                 context: Optional[ScenarioContext] = None,
                 result: Optional[ScenarioResult] = None) -> ScenarioResult:
        """Run one case; every step module must be loaded before the first call"""
        if not self.registry.frozen:
            self.dump_registry()
            self.registry.freeze()
        return self.executor.run(
            case.name,
            case.steps,
            session,
            context=context if context is not None else ScenarioContext(),
            attach=attach,
            result=result
        )
