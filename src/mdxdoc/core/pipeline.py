"""Core boundary: MDX text <-> (frontmatter, Document) in both directions"""

import logging
from typing import Sequence

from pydantic import BaseModel, Field

from mdxdoc.core.export import serialize_document
from mdxdoc.core.frontmatter import assemble_mdx, load_frontmatter, split_frontmatter
from mdxdoc.core.importer import ast_to_document
from mdxdoc.core.imports import (
    DEFAULT_EXTENSION,
    DEFAULT_IMPORT_ROOT,
    extract_imports,
    generate_imports,
)
from mdxdoc.core.models import Document
from mdxdoc.core.parse import MdxSyntaxError, parse_body


logger = logging.getLogger(__name__)

__all__ = [
    "MdxSyntaxError",
    "ParsedMdx",
    "assemble_mdx",
    "generate_imports",
    "load_frontmatter",
    "parse_body",
    "parse_mdx_to_document",
    "serialize_document",
    "serialize_document_to_mdx",
    "split_frontmatter",
]


class ParsedMdx(BaseModel):
    yaml:            str = ""
    doc:             Document = Field(default_factory=Document)
    unknown_imports: list[str] = Field(default_factory=list)


def parse_mdx_to_document(raw: str) -> ParsedMdx:
    """Split frontmatter, strip imports, parse the body and map it to a Document.

    Raises MdxSyntaxError when the body's JSX elements are unbalanced.
    """
    yaml_text, body = split_frontmatter(raw)
    body, unknown = extract_imports(body)
    doc = ast_to_document(parse_body(body))
    logger.debug("Parsed %d block(s), %d preserved import(s)", len(doc.children), len(unknown))
    return ParsedMdx(yaml=yaml_text, doc=doc, unknown_imports=unknown)


def serialize_document_to_mdx(
    yaml_text: str,
    doc: Document,
    unknown_imports: Sequence[str] = (),
    import_root: str = DEFAULT_IMPORT_ROOT,
    extension: str = DEFAULT_EXTENSION,
    ) -> str:
    """Serialize `doc` and reassemble it with frontmatter and required imports."""
    body = serialize_document(doc)
    imports = [*unknown_imports, *generate_imports(body, import_root, extension)]
    return assemble_mdx(yaml_text, body, imports)
