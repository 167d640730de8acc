"""Unit tests for core/imports.py"""

import pytest

from mdxdoc.core.imports import extract_imports, generate_imports, import_line, is_known_import


FIGURE_IMPORT = 'import Figure from "../../../components/Figure.astro";'


def test_generate_imports_skips_fenced_usage():
    """A tag inside a fenced block does not require an import; one outside does."""
    body = '```md\n<Figure src="x" />\n```\n\n<Figure src="y" />\n'
    assert generate_imports(body) == [FIGURE_IMPORT]


def test_generate_imports_fenced_only():
    """Usage only inside a fence yields no imports."""
    assert generate_imports('```md\n<Figure src="x" />\n```\n') == []


def test_generate_imports_declaration_order():
    """Imports follow registry order, not order of appearance."""
    body = '<TwitterCard id="1" />\n\n<LiteYouTube videoId="a" title="b" />\n\n<Figure src="x" />'
    assert generate_imports(body) == [
        import_line("LiteYouTube"),
        import_line("Figure"),
        import_line("TwitterCard"),
    ]


@pytest.mark.parametrize("body", ["<Figures />", "<FigureCaption>x</FigureCaption>", "Figure", "<Tablet>"])
def test_generate_imports_boundary(body):
    """A longer tag name sharing a prefix does not trigger an import."""
    assert generate_imports(body) == []


@pytest.mark.parametrize("body", ["<Table>", "<Table label=\"a\">", "<Table/>"])
def test_generate_imports_tag_terminators(body):
    """Whitespace, '/' and '>' all end a component name."""
    assert generate_imports(body) == [import_line("Table")]


def test_generate_imports_longer_fence():
    """A shorter backtick run inside a four-backtick fence does not close it."""
    body = '````md\n```\n<Figure src="x" />\n```\n````\n'
    assert generate_imports(body) == []


def test_generate_imports_custom_root():
    """Import root and extension are configurable."""
    assert generate_imports("<Figure />", import_root="@/ui", extension=".tsx") == [
        'import Figure from "@/ui/Figure.tsx";'
    ]


def test_is_known_import():
    """Only default imports of registered components are known."""
    assert is_known_import(FIGURE_IMPORT)
    assert not is_known_import('import { Table } from "some-ui";')
    assert not is_known_import('import Chart from "./Chart.astro";')


def test_extract_imports_strips_known_and_keeps_unknown():
    """Known imports are dropped, unknown ones returned, both removed from the body."""
    body = f'{FIGURE_IMPORT}\nimport Chart from "./Chart.astro";\n\n# Title\n'
    clean, unknown = extract_imports(body)
    assert unknown == ['import Chart from "./Chart.astro";']
    assert "import" not in clean
    assert "# Title" in clean


def test_extract_imports_multiline():
    """A multi-line import is accumulated up to its from-clause."""
    body = 'import {\n  a,\n  b,\n} from "./lib";\n\nText\n'
    clean, unknown = extract_imports(body)
    assert unknown == ['import {\n  a,\n  b,\n} from "./lib";']
    assert clean.strip() == "Text"


def test_extract_imports_side_effect():
    """A side-effect import is a complete statement."""
    clean, unknown = extract_imports('import "./styles.css";\nText')
    assert unknown == ['import "./styles.css";']
    assert clean == "Text"


def test_extract_imports_ignores_fenced_code():
    """Import lines inside code fences are content."""
    body = '```js\nimport x from "y";\n```'
    assert extract_imports(body) == (body, [])


def test_extract_imports_unterminated():
    """An unterminated import is preserved rather than lost."""
    _, unknown = extract_imports("import {\n  a,\n")
    assert unknown == ["import {\n  a,\n"]


def test_generate_imports_skips_fence_nested_in_list():
    """A fence indented under a nested list item still hides its tags."""
    body = '- a\n  - b\n\n    ```md\n    <Figure src="x" />\n    ```\n'
    assert generate_imports(body) == []


def test_extract_imports_ignores_fence_nested_in_list():
    """An import line inside a deeply indented fence stays in the body."""
    body = '10. step\n\n    ```python\n    import os\n    ```\n\n# After'
    assert extract_imports(body) == (body, [])


@pytest.mark.parametrize("body", [
    "Some text\nimport x from \"y\";\n",
    "  import x from \"y\";\n",
    "- item\n\n  import x from \"y\";\n",
])
def test_extract_imports_requires_statement_position(body):
    """Imports continuing a paragraph or indented into a block are content."""
    assert extract_imports(body) == (body, [])


def test_extract_imports_consecutive_statements():
    """Imports on consecutive lines after a blank line are all extracted."""
    body = 'Intro\n\nimport a from "a";\nimport b from "b";\n\nText'
    clean, unknown = extract_imports(body)
    assert unknown == ['import a from "a";', 'import b from "b";']
    assert clean == "Intro\n\n\nText"
