"""
Tests for pagination helpers.
"""
import pytest

from shutterconnect.lib.pagination import build_pagination, offset_for


@pytest.mark.unit
def test_offset_for():
    assert offset_for(1, 10) == 0
    assert offset_for(3, 12) == 24


@pytest.mark.unit
def test_first_of_several_pages():
    pagination = build_pagination(page=1, limit=10, total=25)

    assert pagination.total_pages == 3
    assert pagination.has_next is True
    assert pagination.has_prev is False


@pytest.mark.unit
def test_last_page():
    pagination = build_pagination(page=3, limit=10, total=25)

    assert pagination.has_next is False
    assert pagination.has_prev is True


@pytest.mark.unit
def test_empty_result():
    pagination = build_pagination(page=1, limit=12, total=0)

    assert pagination.total_pages == 0
    assert pagination.has_next is False
    assert pagination.has_prev is False
