"""Integration tests for the MDX -> Document -> MDX pipeline on the fixture document.

The fixture (tests/conftest.py) is written in normalized form, so its body
survives a full round trip byte for byte; only the import block changes,
because imports are regenerated from the components the body uses.
"""

from mdxdoc.core.frontmatter import split_frontmatter
from mdxdoc.core.imports import extract_imports
from mdxdoc.core.models import Figure, Table, YoutubeEmbed
from mdxdoc.core.pipeline import parse_mdx_to_document, serialize_document_to_mdx


def test_fixture_body_is_a_fixed_point(full_mdx):
    parsed = parse_mdx_to_document(full_mdx)
    out = serialize_document_to_mdx(parsed.yaml, parsed.doc, parsed.unknown_imports)
    expected_body = extract_imports(split_frontmatter(full_mdx).body).body.strip("\n")
    assert extract_imports(split_frontmatter(out).body).body.strip("\n") == expected_body


def test_fixture_frontmatter_and_imports(full_mdx):
    parsed = parse_mdx_to_document(full_mdx)
    out = serialize_document_to_mdx(parsed.yaml, parsed.doc, parsed.unknown_imports)
    header = out.split("\n\n", 1)[0]
    assert header == "\n".join([
        "---",
        'title: "Everything"',
        "tags: [a, b]",
        "---",
        'import Chart from "../charts/Chart.astro";',
        'import LiteYouTube from "../../../components/LiteYouTube.astro";',
        'import Figure from "../../../components/Figure.astro";',
        'import Table from "../../../components/Table.astro";',
        'import TwitterCard from "../../../components/TwitterCard.astro";',
    ])


def test_fixture_components(full_mdx):
    blocks = parse_mdx_to_document(full_mdx).doc.children
    figure = next(b for b in blocks if isinstance(b, Figure))
    assert (figure.src, figure.width, figure.caption) == ("/img/b.png", "640", "A figure")
    video = next(b for b in blocks if isinstance(b, YoutubeEmbed))
    assert video.video_id == "abc123"
    table = next(b for b in blocks if isinstance(b, Table))
    assert (table.label, table.caption, len(table.children)) == ("tbl:1", "Numbers", 2)


def test_import_root_override(full_mdx):
    parsed = parse_mdx_to_document(full_mdx)
    out = serialize_document_to_mdx(parsed.yaml, parsed.doc, import_root="~/ui", extension=".tsx")
    assert 'import Figure from "~/ui/Figure.tsx";' in out
