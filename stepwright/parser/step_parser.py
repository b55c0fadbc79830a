"""
Step parser
Turns the body of one Background/Scenario into an ordered list of steps,
attaching data tables and text blocks to the step they follow
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from stepwright.core.exceptions import FeatureParseError
from stepwright.utils.logger import setup_logger

logger = setup_logger(__name__)

TEXT_BLOCK_DELIMITER = '"""'
TABLE_DELIMITER = '|'
STEP_KEYWORD_PATTERN = re.compile(r'^(Given|When|Then|And|But)\s+', re.IGNORECASE)
HEADER_PATTERN = re.compile(r'^(Feature|Background|Scenario Outline|Scenario):')


@dataclass
class ParsedStep:
    raw_text: str
    clean_text: str
    data_table: Optional[List[List[str]]] = None
    text_block: Optional[str] = None
    keyword: str = ''
    line: int = 0


def clean_step_text(text: str) -> str:
    """Strip the leading keyword and a trailing colon"""
    text = STEP_KEYWORD_PATTERN.sub('', text.strip())
    if text.endswith(':'):
        text = text[:-1]
    return text.strip()


def split_table_row(line: str) -> List[str]:
    """``| a | b |`` -> ``['a', 'b']``"""
    return [cell.strip() for cell in line.strip().split(TABLE_DELIMITER)[1:-1]]


def parse_steps(block: Union[str, Sequence[str]], first_line: int = 1,
                file_path: Optional[str] = None) -> List[ParsedStep]:
    """
    Parse a Background/Scenario body into steps.

    Args:
        block: The raw body text, or its lines
        first_line: Line number of the first body line in the file
        file_path: Used in error messages only

    Returns:
        Steps in file order
    """
    lines = block.splitlines() if isinstance(block, str) else list(block)

    steps: List[ParsedStep] = []
    current: Optional[ParsedStep] = None
    buffer: List[str] = []
    block_opened_at = None

    for offset, line in enumerate(lines):
        line_number = first_line + offset
        trimmed = line.strip()

        if trimmed.startswith(TEXT_BLOCK_DELIMITER):
            if block_opened_at is None:
                block_opened_at = line_number
                buffer = []
            else:
                if current is not None:
                    current.text_block = '\n'.join(buffer)
                else:
                    logger.warning(f"Text block at line {block_opened_at} has no step to attach to")
                block_opened_at = None
            continue

        # Kept verbatim: text blocks may carry meaningful indentation
        if block_opened_at is not None:
            buffer.append(line)
            continue

        if not trimmed or trimmed.startswith('#') or trimmed.startswith('@'):
            continue
        if HEADER_PATTERN.match(trimmed):
            continue

        if trimmed.startswith(TABLE_DELIMITER):
            if current is None:
                logger.warning(f"Table row at line {line_number} has no step to attach to")
                continue
            if current.data_table is None:
                current.data_table = []
            current.data_table.append(split_table_row(trimmed))
            continue

        keyword_match = STEP_KEYWORD_PATTERN.match(trimmed)
        current = ParsedStep(
            raw_text=trimmed,
            clean_text=clean_step_text(trimmed),
            keyword=keyword_match.group(1) if keyword_match else '',
            line=line_number
        )
        steps.append(current)

    if block_opened_at is not None:
        raise FeatureParseError("Unterminated text block", file_path, block_opened_at)

    return steps
