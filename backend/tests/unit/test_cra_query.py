"""Unit tests for listing value objects: pagination and pages."""

import pytest

from app.domain.entities import Page, Pagination


@pytest.mark.parametrize(
    ("limit", "offset", "expected"),
    [
        (None, None, (50, 0)),
        (10, 5, (10, 5)),
        (0, 0, (50, 0)),
        (-3, -7, (50, 0)),
        (10_000, 0, (500, 0)),
    ],
)
def test_pagination_clamps_raw_values(limit, offset, expected):
    pagination = Pagination.from_params(limit, offset)
    assert (pagination.limit, pagination.offset) == expected


def test_pagination_honours_configured_bounds():
    pagination = Pagination.from_params(None, None, default_limit=20, max_limit=100)
    assert pagination.limit == 20
    assert Pagination.from_params(250, 0, max_limit=100).limit == 100


def test_has_more():
    # 5 matching rows, pages of 2
    assert Page(items=[1, 2], total=5, limit=2, offset=0).has_more is True
    assert Page(items=[3, 4], total=5, limit=2, offset=2).has_more is True
    assert Page(items=[5], total=5, limit=2, offset=4).has_more is False
    assert Page(items=[], total=0, limit=50, offset=0).has_more is False
