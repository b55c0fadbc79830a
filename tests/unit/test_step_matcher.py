"""Unit tests for step matching"""
import re

from cucumber_expressions.parameter_type import ParameterType

from stepwright.core.registry import Literal
from stepwright.executor.step_matcher import StepMatcher


def click(page, context, selector):
    pass


def pause(page, context):
    pass


def test_regex_literal_and_no_match(registry):
    registry.register(re.compile(r'^I click "(.*)"$'), click)
    registry.register(Literal('I pause'), pause)
    matcher = StepMatcher(registry)

    clicked = matcher.match('I click "#ok"')
    paused = matcher.match('I pause')

    assert clicked.handler is click
    assert clicked.args == ['#ok']
    assert paused.handler is pause
    assert paused.args == []
    assert matcher.match('I vanish') is None


def test_expression_arguments_use_their_values(registry):
    registry.register('I click on element {string}', click)
    registry.register('I wait {int} seconds', pause)
    matcher = StepMatcher(registry)

    assert matcher.match('I click on element "#submit"').args == ['#submit']
    assert matcher.match('I wait 3 seconds').args == [3]
    assert matcher.match('I wait three seconds') is None


def test_first_registered_wins(registry):
    registry.register(re.compile(r'^I click "(.*)"$'), click)
    registry.register(Literal('I click "#ok"'), pause)
    matcher = StepMatcher(registry)

    result = matcher.match('I click "#ok"')

    assert result.handler is click
    assert [d.handler for d in matcher.candidates('I click "#ok"')] == [click, pause]


def test_broken_expression_falls_through_to_next_definition(registry):
    registry.register('I have {no_such_type} items', click)
    registry.register(re.compile(r'^I have (\d+) items$'), pause)

    result = StepMatcher(registry).match('I have 4 items')

    assert result.handler is pause
    assert result.args == ['4']


def test_matching_is_case_and_whitespace_sensitive(registry):
    registry.register(Literal('I pause'), pause)
    matcher = StepMatcher(registry)

    assert matcher.match('i pause') is None
    assert matcher.match('I  pause') is None
    assert matcher.match('I pause ') is None


def test_regex_search_is_not_anchored(registry):
    registry.register(re.compile(r'click "(.*?)"'), click)

    assert StepMatcher(registry).match('I double click "#ok" twice').args == ['#ok']


def test_unmatched_optional_group_is_none(registry):
    registry.register(re.compile(r'^I wait( \d+)?$'), pause)

    assert StepMatcher(registry).match('I wait').args == [None]


def test_failing_parameter_transformer_falls_through_to_next_definition(registry):
    def to_colour(*values):
        raise ValueError(f"bad colour {values[0]}")

    registry.define_parameter_type(ParameterType(
        'colour', r'red|blue', str, transformer=to_colour,
        use_for_snippets=True, prefer_for_regexp_match=False
    ))
    registry.register('I pick {colour}', click)
    registry.register(re.compile(r'^I pick (\w+)$'), pause)

    result = StepMatcher(registry).match('I pick red')

    assert result.handler is pause
    assert result.args == ['red']
