"""Unit tests for core/frontmatter.py"""

import pytest

from mdxdoc.core.frontmatter import assemble_mdx, load_frontmatter, split_frontmatter


def test_split_frontmatter_with_yaml():
    """split_frontmatter returns the YAML text and the remaining body."""
    yaml_text, body = split_frontmatter("---\ntitle: Hello\n---\n# Body\n")
    assert yaml_text == "title: Hello"
    assert body == "# Body\n"


def test_split_frontmatter_no_frontmatter():
    """Text without a leading fence is returned entirely as body."""
    text = "# No frontmatter\n"
    assert split_frontmatter(text) == ("", text)


def test_split_frontmatter_unclosed_fence():
    """A missing closing fence is not an error: everything stays in body."""
    text = "---\ntitle: Hello\n# Body\n"
    assert split_frontmatter(text) == ("", text)


def test_split_frontmatter_empty_block():
    """An empty YAML block yields an empty string."""
    assert split_frontmatter("---\n---\nbody") == ("", "body")


def test_split_frontmatter_crlf():
    """Windows line endings around the fences are accepted."""
    yaml_text, body = split_frontmatter("---\r\ntitle: Hi\r\n---\r\nBody")
    assert yaml_text == "title: Hi"
    assert body == "Body"


def test_assemble_without_imports():
    """assemble_mdx writes fence, blank line, body and a final newline."""
    assert assemble_mdx("title: Hi", "# Body", []) == "---\ntitle: Hi\n---\n\n# Body\n"


def test_assemble_with_imports():
    """Imports sit directly under the fence, followed by a blank line."""
    out = assemble_mdx("title: Hi", "# Body", ['import A from "a";', 'import B from "b";'])
    assert out == '---\ntitle: Hi\n---\nimport A from "a";\nimport B from "b";\n\n# Body\n'


@pytest.mark.parametrize("yaml_text,body", [
    ('title: "Hi"', "# Hello\n\nText."),
    ("", "Body only"),
    ("a: 1\nb:\n  - x\n  - y", "<Figure src=\"a.png\" />"),
])
def test_assemble_split_idempotent(yaml_text, body):
    """Splitting an assembled file and reassembling it reproduces it exactly."""
    assembled = assemble_mdx(yaml_text, body, [])
    split_yaml, split_body = split_frontmatter(assembled)
    assert split_yaml == yaml_text
    assert split_body.strip("\n") == body
    assert assemble_mdx(split_yaml, split_body, []) == assembled


def test_load_frontmatter_mapping():
    """load_frontmatter parses YAML into a dict."""
    assert load_frontmatter("title: Hello\ntags: [a, b]") == {"title": "Hello", "tags": ["a", "b"]}


def test_load_frontmatter_empty():
    """Blank frontmatter loads as an empty dict."""
    assert load_frontmatter("") == {}


def test_load_frontmatter_invalid_yaml():
    """Malformed YAML raises ValueError."""
    with pytest.raises(ValueError, match="Invalid YAML frontmatter"):
        load_frontmatter("key: [unclosed")


def test_load_frontmatter_not_mapping():
    """A YAML list is rejected: frontmatter must be a mapping."""
    with pytest.raises(ValueError, match="expected a mapping"):
        load_frontmatter("- a\n- b")
