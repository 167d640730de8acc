"""Unit tests for core/utils/mark.py"""

import pytest
from markdown_it import MarkdownIt

from mdxdoc.core.utils.mark import mark_rule


@pytest.fixture(name="md")
def md_fixture():
    return MarkdownIt("commonmark").use(mark_rule)


@pytest.mark.parametrize("src,html", [
    ("==x==", "<p><mark>x</mark></p>\n"),
    ("a ==b *c*== d", "<p>a <mark>b <em>c</em></mark> d</p>\n"),
    ("===x===", "<p>=<mark>x</mark>=</p>\n"),
    ("a == b", "<p>a == b</p>\n"),
    ("=x=", "<p>=x=</p>\n"),
    ("\\==x==", "<p>==x==</p>\n"),
])
def test_mark_rule(md, src, html):
    assert md.render(src) == html


def test_mark_tokens(md):
    """Pairs become mark_open/mark_close carrying the `==` markup."""
    children = md.parseInline("==x==")[0].children
    assert [t.type for t in children] == ["mark_open", "text", "mark_close"]
    assert {t.markup for t in (children[0], children[2])} == {"=="}
