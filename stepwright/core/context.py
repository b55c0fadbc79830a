"""Per-scenario state passed to every step handler next to the page"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from stepwright.core.exceptions import StepwrightError

VARIABLE_PATTERN = re.compile(r'\$\{([^}]+)\}')


@dataclass
class ScenarioContext:
    """Active element(s) and stored variables for one scenario run"""
    active_element: Any = None
    active_elements: Any = None
    variables: Dict[str, Any] = field(default_factory=dict)

    def set_active_element(self, element: Any) -> None:
        self.active_element = element

    def get_active_element(self) -> Any:
        if self.active_element is None:
            raise StepwrightError("No stored element found. Did you forget a 'When I find...' step?")
        return self.active_element

    def set_active_elements(self, elements: Any) -> None:
        self.active_elements = elements

    def get_active_elements(self) -> Any:
        if self.active_elements is None:
            raise StepwrightError("No stored elements list found.")
        return self.active_elements

    def set_variable(self, name: str, value: Any) -> None:
        self.variables[name.lstrip('@')] = value

    def get_variable(self, name: str, default: Optional[Any] = None) -> Any:
        return self.variables.get(name.lstrip('@'), default)

    def resolve(self, value: Any) -> Any:
        """Return the stored variable for an ``@alias``, otherwise the value itself"""
        if isinstance(value, str) and value.startswith('@'):
            alias = value[1:]
            if alias in self.variables:
                return self.variables[alias]
        return value

    def interpolate(self, text: str) -> str:
        """Replace ``${name}`` with stored variables; unknown names are left alone"""
        def replace(match):
            name = match.group(1)
            if name in self.variables:
                return str(self.variables[name])
            return match.group(0)
        return VARIABLE_PATTERN.sub(replace, text)
