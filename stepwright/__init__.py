"""stepwright - run Gherkin feature files against Playwright pages"""

__version__ = "1.0.0"

from stepwright.core.context import ScenarioContext
from stepwright.core.exceptions import (
    ConfigError,
    FeatureParseError,
    RegistryFrozenError,
    StepDefinitionError,
    StepwrightError,
    UndefinedStepError,
)
from stepwright.core.registry import (
    Expression,
    Literal,
    Regex,
    StepRegistry,
    default_registry,
    given,
    load_step_modules,
    step,
    then,
    when,
)
from stepwright.executor.runner import Runner, ScenarioCase
from stepwright.parser.feature_parser import FeatureParser, parse_feature_text
from stepwright.parser.tag_filter import TagFilter
