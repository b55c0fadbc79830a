"""Shared fixtures: isolated registries, fake pages and feature files on disk"""
from unittest.mock import Mock

import pytest

from stepwright.core.registry import StepRegistry


@pytest.fixture
def registry():
    return StepRegistry()


@pytest.fixture
def fake_page():
    page = Mock()
    page.screenshot.return_value = b'\x89PNG fake'
    return page


@pytest.fixture
def write_feature(tmp_path):
    """Write feature content under tmp_path and return its path"""
    def _write(content, name='test.feature'):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
        return path
    return _write
