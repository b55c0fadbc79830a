"""Unit tests for per-scenario context"""
import pytest

from stepwright.core.context import ScenarioContext
from stepwright.core.exceptions import StepwrightError


def test_active_element_must_be_set_first():
    context = ScenarioContext()

    with pytest.raises(StepwrightError, match='No stored element'):
        context.get_active_element()

    context.set_active_element('button')
    assert context.get_active_element() == 'button'


def test_active_elements_must_be_set_first():
    context = ScenarioContext()

    with pytest.raises(StepwrightError):
        context.get_active_elements()

    context.set_active_elements(['a', 'b'])
    assert context.get_active_elements() == ['a', 'b']


def test_variables_and_aliases():
    context = ScenarioContext()
    context.set_variable('@token', 'abc123')

    assert context.get_variable('token') == 'abc123'
    assert context.resolve('@token') == 'abc123'
    assert context.resolve('@unknown') == '@unknown'
    assert context.resolve('plain') == 'plain'


def test_interpolate():
    context = ScenarioContext(variables={'user': 'alice', 'id': 7})

    assert context.interpolate('/users/${id}/${user}/${missing}') == '/users/7/alice/${missing}'


def test_contexts_do_not_share_variables():
    first, second = ScenarioContext(), ScenarioContext()
    first.set_variable('x', 1)

    assert second.get_variable('x') is None
