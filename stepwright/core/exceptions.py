"""Exception hierarchy for stepwright"""
from typing import Optional


class StepwrightError(Exception):
    """Base class for every error raised by stepwright itself"""


class FeatureParseError(StepwrightError):
    """A feature file could not be turned into scenarios"""

    def __init__(self, message: str, file_path: Optional[str] = None, line: Optional[int] = None):
        self.file_path = file_path
        self.line = line
        location = file_path or '<string>'
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")


class UndefinedStepError(StepwrightError):
    """No registered step definition matches the step text"""

    def __init__(self, step_text: str):
        self.step_text = step_text
        super().__init__(f'Undefined step: "{step_text}"')


class StepDefinitionError(StepwrightError):
    """A step definition was registered or implemented incorrectly"""


class RegistryFrozenError(StepwrightError):
    """Steps were registered after the registry was frozen"""


class ConfigError(StepwrightError):
    """Configuration file is present but unusable"""
