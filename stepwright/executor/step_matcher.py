"""Resolve a step's text to a registered handler and its arguments"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from stepwright.core.registry import StepDefinition, StepHandler, StepRegistry
from stepwright.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class MatchResult:
    handler: StepHandler
    args: List[Any] = field(default_factory=list)
    definition: Optional[StepDefinition] = None


class StepMatcher:
    """
    Linear, first-match-wins lookup over a registry.

    Definitions are tried in registration order. When several patterns could
    match the same text the earliest registered one is used and no error is
    reported. Matching is case and whitespace sensitive.
    """

    def __init__(self, registry: StepRegistry):
        self.registry = registry

    def match(self, text: str) -> Optional[MatchResult]:
        """Return the first matching definition, or None"""
        for definition in self.registry:
            args = definition.match(text)
            if args is not None:
                logger.debug(f"'{text}' matched {definition.describe()}")
                return MatchResult(handler=definition.handler, args=args, definition=definition)
        return None

    def candidates(self, text: str) -> List[StepDefinition]:
        """Every definition matching the text, in the order match() would try them"""
        return [d for d in self.registry if d.match(text) is not None]
