import pytest

from obsidian_copy.models import TagFilter
from obsidian_copy.vault.filters import is_excluded, passes


@pytest.mark.parametrize(
    "tags,include,exclude,expected",
    [
        ({"public"}, {"public"}, set(), True),
        ({"public", "blog"}, {"blog"}, set(), True),
        ({"draft"}, {"public"}, set(), False),
        (set(), {"public"}, set(), False),
        # Empty include admits everything not excluded
        (set(), set(), set(), True),
        ({"anything"}, set(), {"private"}, True),
        ({"private"}, set(), {"private"}, False),
        # Exclusion wins over inclusion
        ({"public", "private"}, {"public"}, {"private"}, False),
        ({"both"}, {"both"}, {"both"}, False),
    ],
)
def test_passes(tags, include, exclude, expected):
    assert passes(frozenset(tags), TagFilter.from_lists(include, exclude)) is expected


def test_is_excluded():
    tag_filter = TagFilter.from_lists(["public"], ["private"])

    assert is_excluded({"private", "public"}, tag_filter)
    assert not is_excluded({"public"}, tag_filter)
