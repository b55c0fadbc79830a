"""
Step registry
Holds every step definition in registration order and the decorators that fill it
"""

import hashlib
import importlib
import importlib.util
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, List, Optional, Union

from cucumber_expressions.expression import CucumberExpression
from cucumber_expressions.parameter_type import ParameterType
from cucumber_expressions.parameter_type_registry import ParameterTypeRegistry

from stepwright.core.exceptions import RegistryFrozenError, StepDefinitionError
from stepwright.utils.logger import setup_logger

logger = setup_logger(__name__)

StepHandler = Callable[..., Any]


class Literal:
    """Matches only text that is exactly equal to the pattern"""

    kind = 'LITERAL'

    def __init__(self, text: str):
        self.text = text

    @property
    def source(self) -> str:
        return self.text

    def match(self, text: str) -> Optional[List[Any]]:
        if text == self.text:
            return []
        return None

    def __eq__(self, other):
        return isinstance(other, Literal) and other.text == self.text

    def __hash__(self):
        return hash((self.kind, self.text))

    def __repr__(self):
        return f"Literal({self.text!r})"


class Regex:
    """Matches anywhere in the text; capture groups become the arguments"""

    kind = 'REGEX'

    def __init__(self, pattern: Union[str, 're.Pattern']):
        self.regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    @property
    def source(self) -> str:
        return self.regex.pattern

    def match(self, text: str) -> Optional[List[Any]]:
        found = self.regex.search(text)
        if not found:
            return None
        return list(found.groups())

    def __repr__(self):
        return f"Regex({self.regex.pattern!r})"


class Expression:
    """
    Cucumber Expression such as ``I click on element {string}``.

    Compilation happens on first use so a malformed expression only ever
    fails to match, it is never rejected when registered.
    """

    kind = 'EXPRESSION'

    def __init__(self, text: str, parameter_types: Optional[ParameterTypeRegistry] = None):
        self.text = text
        self.parameter_types = parameter_types or ParameterTypeRegistry()
        self._compiled = None

    @property
    def source(self) -> str:
        return self.text

    def _compile(self) -> CucumberExpression:
        if self._compiled is None:
            self._compiled = CucumberExpression(self.text, self.parameter_types)
        return self._compiled

    def match(self, text: str) -> Optional[List[Any]]:
        try:
            arguments = self._compile().match(text)
            if arguments is None:
                return None
            # Parameter transformers run lazily inside .value
            return [argument.value for argument in arguments]
        except Exception as e:
            logger.debug(f"Expression '{self.text}' could not be matched: {e}")
            return None

    def __repr__(self):
        return f"Expression({self.text!r})"


Pattern = Union[Literal, Regex, Expression]


@dataclass
class StepDefinition:
    """One registered step: pattern, handler and optional keyword"""
    pattern: Pattern
    handler: StepHandler
    keyword: Optional[str] = None
    location: str = field(default='', compare=False)

    def match(self, text: str) -> Optional[List[Any]]:
        return self.pattern.match(text)

    def describe(self) -> str:
        keyword = f" [{self.keyword}]" if self.keyword else ''
        return f"{self.pattern.kind}: {self.pattern.source}{keyword}"


class StepRegistry:
    """Append-only, ordered collection of step definitions"""

    def __init__(self):
        self._definitions: List[StepDefinition] = []
        self._frozen = False
        self.parameter_types = ParameterTypeRegistry()

    def __iter__(self) -> Iterator[StepDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Mark the registry read-only; call once every step module is loaded"""
        if not self._frozen:
            logger.debug(f"Step registry frozen with {len(self._definitions)} definitions")
        self._frozen = True

    def _to_pattern(self, pattern: Any) -> Pattern:
        if isinstance(pattern, (Literal, Regex, Expression)):
            return pattern
        if isinstance(pattern, re.Pattern):
            return Regex(pattern)
        if isinstance(pattern, str):
            return Expression(pattern, self.parameter_types)
        raise StepDefinitionError(f"Unsupported step pattern type: {type(pattern).__name__}")

    def register(self, pattern: Any, handler: StepHandler, keyword: Optional[str] = None) -> StepDefinition:
        """Append a step definition; duplicates are kept and the first one wins"""
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register '{pattern}' after the step registry was frozen")
        if not callable(handler):
            raise StepDefinitionError(f"Step handler for '{pattern}' is not callable")

        definition = StepDefinition(
            pattern=self._to_pattern(pattern),
            handler=handler,
            keyword=keyword,
            location=f"{getattr(handler, '__module__', '?')}.{getattr(handler, '__qualname__', '?')}"
        )
        self._definitions.append(definition)
        return definition

    def step(self, pattern: Any, keyword: Optional[str] = None) -> Callable[[StepHandler], StepHandler]:
        """Decorator form of register()"""
        def decorator(handler: StepHandler) -> StepHandler:
            self.register(pattern, handler, keyword)
            return handler
        return decorator

    def given(self, pattern: Any) -> Callable[[StepHandler], StepHandler]:
        return self.step(pattern, 'Given')

    def when(self, pattern: Any) -> Callable[[StepHandler], StepHandler]:
        return self.step(pattern, 'When')

    def then(self, pattern: Any) -> Callable[[StepHandler], StepHandler]:
        return self.step(pattern, 'Then')

    def define_parameter_type(self, parameter_type: ParameterType) -> None:
        """Make a custom {type} available to expressions of this registry"""
        self.parameter_types.define_parameter_type(parameter_type)


default_registry = StepRegistry()

step = default_registry.step
given = default_registry.given
when = default_registry.when
then = default_registry.then


def load_step_modules(modules: Iterable[str]) -> List[Any]:
    """
    Import step implementation modules so they register their steps.

    Each entry is a dotted module name or a path to a ``.py`` file.
    """
    loaded = []
    for name in modules:
        if name.endswith('.py'):
            path = Path(name).resolve()
            if not path.exists():
                raise StepDefinitionError(f"Step module not found: {name}")
            path_hash = hashlib.sha1(str(path).encode('utf-8')).hexdigest()[:12]
            module_name = f"stepwright_steps_{path.stem}_{path_hash}"
            if module_name in sys.modules:
                loaded.append(sys.modules[module_name])
                continue
            spec = importlib.util.spec_from_file_location(module_name, path)
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            try:
                spec.loader.exec_module(module)
            except BaseException:
                del sys.modules[module_name]
                raise
        else:
            module = importlib.import_module(name)
        logger.debug(f"Loaded step module: {name}")
        loaded.append(module)
    return loaded
