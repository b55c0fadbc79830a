"""Unit tests for the feature scanner"""
import pytest

from stepwright.core.exceptions import FeatureParseError
from stepwright.parser.feature_parser import FeatureParser, parse_feature_text
from stepwright.parser.tag_filter import TagFilter

FEATURE = '''# language: en
@web @regression
Feature: Login
  Users sign in with a password

  Background:
    Given I open "/login"

  @smoke
  # explains the scenario below
  Scenario: Valid credentials
    When I fill the form:
      | Target | Value |
      | #user  | alice |
    Then I should see "Welcome"

  @ignore
  Scenario: Locked account
    When I submit
      """
      Scenario: not a header inside a text block
      """
    Then I should see "Locked"
'''


def test_feature_header_tags_and_description():
    feature = parse_feature_text(FEATURE, 'login.feature')

    assert feature.name == 'Login'
    assert feature.tags == ['@web', '@regression']
    assert feature.description == 'Users sign in with a password'
    assert feature.file_path == 'login.feature'


def test_background_is_parsed_once():
    feature = parse_feature_text(FEATURE)

    assert [s.clean_text for s in feature.background] == ['I open "/login"']


def test_scenarios_with_merged_tags():
    feature = parse_feature_text(FEATURE)

    assert [s.name for s in feature.scenarios] == ['Valid credentials', 'Locked account']
    assert feature.scenarios[0].tags == ['@web', '@regression', '@smoke']
    assert feature.scenarios[1].tags == ['@web', '@regression', '@ignore']
    assert feature.scenarios[0].line_number == 11


def test_scenario_bodies_come_from_original_text():
    feature = parse_feature_text(FEATURE)
    valid, locked = feature.scenarios

    assert valid.steps[0].data_table == [['Target', 'Value'], ['#user', 'alice']]
    assert [s.clean_text for s in valid.steps] == ['I fill the form', 'I should see "Welcome"']
    assert locked.steps[0].text_block == '      Scenario: not a header inside a text block'
    assert [s.clean_text for s in locked.steps] == ['I submit', 'I should see "Locked"']


def test_effective_steps_prepend_background():
    feature = parse_feature_text(FEATURE)

    steps = feature.steps_for(feature.scenarios[0])

    assert [s.clean_text for s in steps] == ['I open "/login"', 'I fill the form', 'I should see "Welcome"']


def test_duplicate_scenario_names_keep_their_own_bodies():
    content = '''Feature: Twins
  Scenario: Same name
    Given the first body
  Scenario: Same name
    Given the second body
'''
    feature = parse_feature_text(content)

    assert [s.steps[0].clean_text for s in feature.scenarios] == ['the first body', 'the second body']


def test_missing_feature_header():
    feature = parse_feature_text('Scenario: Alone\n  Given something\n')

    assert feature.name == 'Unnamed Feature'
    assert feature.tags == []
    assert feature.background is None
    assert len(feature.scenarios) == 1


def test_tag_run_is_broken_by_other_lines():
    content = '''Feature: Tags
  Scenario: First
    Given a step
  @orphan
    And a step after the tags
  Scenario: Second
    Given another step
'''
    feature = parse_feature_text(content)

    assert feature.scenarios[1].tags == []


def test_commented_out_tags_are_ignored():
    content = '''Feature: Tags
  # @ignore
  Scenario: Still runs
    Given a step
'''
    feature = parse_feature_text(content)

    assert feature.scenarios[0].tags == []


def test_unterminated_text_block_in_file():
    content = 'Feature: Broken\n  Scenario: Open block\n    Given a step\n    """\n    dangling\n'

    with pytest.raises(FeatureParseError) as exc_info:
        parse_feature_text(content, 'broken.feature')

    assert exc_info.value.line == 4


def test_scenario_outline_is_expanded():
    content = '''Feature: Outline
  Scenario Outline: Search for <term>
    When I search for "<term>"
    Then I see <count> results
      | term   | count   |
      | <term> | <count> |

    @fast
    Examples:
      | term  | count |
      | cats  | 3     |
      | dogs  | 5     |
'''
    feature = parse_feature_text(content)

    assert [s.name for s in feature.scenarios] == ['Search for cats [1]', 'Search for dogs [2]']
    first = feature.scenarios[0]
    assert first.keyword == 'Scenario Outline'
    assert first.tags == ['@fast']
    assert first.example == {'term': 'cats', 'count': '3'}
    assert [s.clean_text for s in first.steps] == ['I search for "cats"', 'I see 3 results']
    assert first.steps[1].data_table == [['term', 'count'], ['cats', '3']]


def test_outline_without_examples_runs_verbatim():
    feature = parse_feature_text('Feature: X\n  Scenario Outline: Raw\n    Given I see <thing>\n')

    assert feature.scenarios[0].steps[0].clean_text == 'I see <thing>'


def test_parsing_is_idempotent():
    assert parse_feature_text(FEATURE, 'a.feature') == parse_feature_text(FEATURE, 'a.feature')


def test_parse_features_applies_tag_filter(write_feature, tmp_path):
    write_feature(FEATURE, 'login.feature')
    write_feature('Feature: Other\n  @nightly\n  Scenario: Slow\n    Given a step\n', 'nested/other.feature')

    features = FeatureParser(str(tmp_path)).parse_features(TagFilter('smoke,nightly'))

    assert sorted(f.name for f in features) == ['Login', 'Other']
    login = next(f for f in features if f.name == 'Login')
    assert [s.name for s in login.scenarios] == ['Valid credentials']


def test_parse_features_with_glob(write_feature, tmp_path):
    write_feature(FEATURE, 'login.feature')

    features = FeatureParser(str(tmp_path / '*.feature')).parse_features()

    assert len(features) == 1
    assert len(features[0].scenarios) == 2


def test_no_files_found_is_not_fatal(tmp_path, caplog):
    features = FeatureParser(str(tmp_path / 'missing' / '*.feature')).parse_features()

    assert features == []
    assert 'No feature files found' in caplog.text


def test_file_without_scenarios_is_skipped_with_warning(write_feature, tmp_path, caplog):
    write_feature('Feature: Empty\n  Just a description\n', 'empty.feature')

    assert FeatureParser(str(tmp_path)).parse_features() == []
    assert '0 scenarios' in caplog.text


def test_glob_matching_directories_keeps_only_files(write_feature, tmp_path):
    write_feature(FEATURE, 'login/login.feature')

    features = FeatureParser(str(tmp_path / '**')).parse_features()

    assert [f.name for f in features] == ['Login']
