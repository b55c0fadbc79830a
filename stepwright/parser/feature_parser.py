"""
Feature parser
Finds Feature/Background/Scenario boundaries in a feature file and builds
the Feature/Scenario structures the runner executes
"""

import glob
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from stepwright.core.exceptions import FeatureParseError
from stepwright.parser.step_parser import ParsedStep, TEXT_BLOCK_DELIMITER, parse_steps, split_table_row
from stepwright.parser.tag_filter import TagFilter, extract_tags, is_comment_line, is_tag_line, merge_tags
from stepwright.utils.helpers import substitute_placeholders
from stepwright.utils.logger import setup_logger

logger = setup_logger(__name__)

SECTION_PATTERN = re.compile(r'^(Feature|Background|Scenario Outline|Scenario|Examples):\s*(.*)$')
DEFAULT_FEATURE_NAME = 'Unnamed Feature'


@dataclass
class Scenario:
    name: str
    steps: List[ParsedStep]
    tags: List[str]
    line_number: int = 0
    keyword: str = 'Scenario'
    example: Optional[Dict[str, str]] = None


@dataclass
class Feature:
    name: str
    description: str
    scenarios: List[Scenario]
    tags: List[str]
    background: Optional[List[ParsedStep]] = None
    file_path: str = ""

    def steps_for(self, scenario: Scenario) -> List[ParsedStep]:
        """Background steps followed by the scenario's own steps"""
        return list(self.background or []) + list(scenario.steps)


@dataclass
class _Section:
    kind: str
    name: str
    tags: List[str]
    header_index: int
    end_index: int = 0


def _scan_sections(lines: List[str], file_path: Optional[str]) -> List[_Section]:
    """Single pass over the file recording every section and its line range"""
    sections: List[_Section] = []
    pending_tags: List[str] = []
    text_block_opened_at = None

    for index, line in enumerate(lines):
        trimmed = line.strip()

        if text_block_opened_at is not None:
            if trimmed.startswith(TEXT_BLOCK_DELIMITER):
                text_block_opened_at = None
            continue

        if trimmed.startswith(TEXT_BLOCK_DELIMITER):
            text_block_opened_at = index
            pending_tags = []
            continue

        # Comments and blank lines do not break a tag run
        if not trimmed or is_comment_line(trimmed):
            continue

        if is_tag_line(trimmed):
            pending_tags.extend(extract_tags(trimmed))
            continue

        header = SECTION_PATTERN.match(trimmed)
        if header:
            if sections:
                sections[-1].end_index = index
            sections.append(_Section(
                kind=header.group(1),
                name=header.group(2).strip(),
                tags=merge_tags(pending_tags),
                header_index=index
            ))
        pending_tags = []

    if text_block_opened_at is not None:
        raise FeatureParseError("Unterminated text block", file_path, text_block_opened_at + 1)

    if sections:
        sections[-1].end_index = len(lines)
    return sections


def _description(body: List[str]) -> str:
    described = []
    for line in body:
        trimmed = line.strip()
        if not trimmed or is_comment_line(trimmed) or is_tag_line(trimmed):
            continue
        described.append(trimmed)
    return '\n'.join(described)


def _substitute_step(step: ParsedStep, values: Dict[str, str]) -> ParsedStep:
    table = None
    if step.data_table is not None:
        table = [[substitute_placeholders(cell, values) for cell in row] for row in step.data_table]
    text_block = None
    if step.text_block is not None:
        text_block = substitute_placeholders(step.text_block, values)
    return replace(
        step,
        raw_text=substitute_placeholders(step.raw_text, values),
        clean_text=substitute_placeholders(step.clean_text, values),
        data_table=table,
        text_block=text_block
    )


def _expand_outline(outline: Scenario, tables: List[Tuple[List[str], List[List[str]]]]) -> List[Scenario]:
    """One scenario per Examples row"""
    expanded = []
    index = 0
    for tags, rows in tables:
        if len(rows) < 2:
            continue
        headers = rows[0]
        for row in rows[1:]:
            if len(row) != len(headers):
                logger.warning(f"Skipping examples row of '{outline.name}' with {len(row)} cells, "
                               f"expected {len(headers)}")
                continue
            index += 1
            values = dict(zip(headers, row))
            expanded.append(Scenario(
                name=f"{substitute_placeholders(outline.name, values)} [{index}]",
                steps=[_substitute_step(s, values) for s in outline.steps],
                tags=merge_tags(outline.tags, tags),
                line_number=outline.line_number,
                keyword=outline.keyword,
                example=values
            ))
    return expanded


def parse_feature_text(content: str, file_path: str = "") -> Feature:
    """
    Parse the content of one feature file.

    Bodies are cut from the original lines using the ranges recorded while
    scanning, so comments and text blocks inside them are intact.
    """
    lines = content.splitlines()
    sections = _scan_sections(lines, file_path or None)

    feature = Feature(
        name=DEFAULT_FEATURE_NAME,
        description="",
        scenarios=[],
        tags=[],
        file_path=file_path
    )
    examples: Dict[int, List[Tuple[List[str], List[List[str]]]]] = {}
    outline: Optional[Scenario] = None

    for section in sections:
        body = lines[section.header_index + 1:section.end_index]
        first_line = section.header_index + 2

        if section.kind == 'Feature':
            feature.name = section.name or DEFAULT_FEATURE_NAME
            feature.tags = section.tags
            feature.description = _description(body)

        elif section.kind == 'Background':
            if feature.background is not None:
                logger.warning(f"Ignoring extra Background at line {section.header_index + 1} in {file_path}")
                continue
            feature.background = parse_steps(body, first_line, file_path or None)

        elif section.kind in ('Scenario', 'Scenario Outline'):
            scenario = Scenario(
                name=section.name,
                steps=parse_steps(body, first_line, file_path or None),
                tags=merge_tags(feature.tags, section.tags),
                line_number=section.header_index + 1,
                keyword=section.kind
            )
            feature.scenarios.append(scenario)
            outline = scenario if section.kind == 'Scenario Outline' else None

        elif section.kind == 'Examples':
            if outline is None:
                logger.warning(f"Examples at line {section.header_index + 1} do not follow a Scenario Outline")
                continue
            rows = [split_table_row(line) for line in body if line.strip().startswith('|')]
            examples.setdefault(id(outline), []).append((section.tags, rows))

    if examples:
        scenarios = []
        for scenario in feature.scenarios:
            if id(scenario) in examples:
                scenarios.extend(_expand_outline(scenario, examples[id(scenario)]))
            else:
                scenarios.append(scenario)
        feature.scenarios = scenarios

    return feature


class FeatureParser:
    """Discover and parse feature files"""

    def __init__(self, features: str):
        self.features = str(features)

    def discover(self) -> List[Path]:
        """Feature files for a glob pattern, a directory or a single file"""
        path = Path(self.features)
        if path.is_dir():
            files = sorted(path.glob("**/*.feature"))
        elif path.is_file():
            files = [path]
        else:
            files = sorted(Path(p) for p in glob.glob(self.features, recursive=True) if Path(p).is_file())

        if not files:
            logger.warning(f"No feature files found for: {self.features}")
        return files

    def parse_file(self, file_path: Path) -> Feature:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
        return parse_feature_text(content, str(file_path))

    def parse_features(self, tag_filter: Optional[TagFilter] = None) -> List[Feature]:
        """Parse every discovered file and keep the scenarios the filter admits"""
        features = []

        for feature_file in self.discover():
            feature = self.parse_file(feature_file)

            if not feature.scenarios:
                logger.warning(f"File matched but 0 scenarios found in: {feature_file}")
                continue

            admitted = []
            for scenario in feature.scenarios:
                reason = tag_filter.skip_reason(scenario.tags) if tag_filter else None
                if reason:
                    logger.info(f"Skipping scenario '{scenario.name}': {reason}")
                    continue
                admitted.append(scenario)

            if admitted:
                features.append(replace(feature, scenarios=admitted))

        return features
