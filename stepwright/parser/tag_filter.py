"""Tag extraction and the OR-of-AND tag filter expression"""
import os
import re
from typing import Iterable, List, Optional, Sequence

DEFAULT_EXCLUDE_TAG = '@ignore'
DEFAULT_TAGS_ENV_VAR = 'TAGS'

COMMENT_PATTERN = re.compile(r'^#(\s|$)')


def normalize_tag(tag: str) -> str:
    tag = tag.strip()
    if tag and not tag.startswith('@'):
        tag = f"@{tag}"
    return tag


def is_comment_line(line: str) -> bool:
    """``# note`` and a bare ``#`` are comments, ``#user`` is not"""
    return bool(COMMENT_PATTERN.match(line.strip()))


def is_tag_line(line: str) -> bool:
    return line.strip().startswith('@')


def extract_tags(line: str) -> List[str]:
    """Tags on a tag-only line, stopping at a trailing comment"""
    tags = []
    for token in line.split():
        if token.startswith('#'):
            break
        if token.startswith('@') and len(token) > 1:
            tags.append(token)
    return tags


def merge_tags(*tag_groups: Iterable[str]) -> List[str]:
    """Union of tag groups, first occurrence order kept"""
    merged = []
    for group in tag_groups:
        for tag in group:
            if tag not in merged:
                merged.append(tag)
    return merged


class TagFilter:
    """
    Decides which scenarios run.

    ``"smoke+critical,nightly"`` admits (smoke AND critical) OR nightly.
    A scenario carrying the exclude tag never runs, whatever the expression.
    """

    def __init__(self, expression: Optional[str] = None, exclude_tag: Optional[str] = DEFAULT_EXCLUDE_TAG):
        self.expression = (expression or '').strip() or None
        self.exclude_tag = normalize_tag(exclude_tag) if exclude_tag else None
        self.groups = self._parse(self.expression)

    @classmethod
    def from_options(cls, tags: Optional[Sequence[str]] = None,
                     exclude_tag: Optional[str] = DEFAULT_EXCLUDE_TAG,
                     env_var: str = DEFAULT_TAGS_ENV_VAR) -> 'TagFilter':
        """Explicit tags win over the environment variable"""
        if isinstance(tags, str):
            expression = tags
        elif tags:
            expression = ','.join(t for t in tags if t)
        else:
            expression = None
        if not expression:
            expression = os.environ.get(env_var) if env_var else None
        return cls(expression, exclude_tag)

    @staticmethod
    def _parse(expression: Optional[str]) -> List[List[str]]:
        if not expression:
            return []
        groups = []
        for group in expression.split(','):
            required = [normalize_tag(tag) for tag in group.split('+') if tag.strip()]
            if required:
                groups.append(required)
        return groups

    def skip_reason(self, tags: Iterable[str]) -> Optional[str]:
        tag_set = set(tags)
        if self.exclude_tag and self.exclude_tag in tag_set:
            return f"tagged {self.exclude_tag}"
        if self.groups and not any(all(tag in tag_set for tag in group) for group in self.groups):
            return f"does not match tag filter '{self.expression}'"
        return None

    def admits(self, tags: Iterable[str]) -> bool:
        return self.skip_reason(tags) is None

    def __repr__(self):
        return f"TagFilter({self.expression!r}, exclude_tag={self.exclude_tag!r})"
