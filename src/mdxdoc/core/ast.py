"""Generic Markdown/MDX syntax tree produced by the parser adapter"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class JsxAttribute:
    """One attribute of a component tag.

    `value` is None for a bare boolean attribute. For `{...}` attributes
    `expression` is True and `value` holds the source between the braces.
    """
    name:       str
    value:      Optional[str] = None
    expression: bool = False


@dataclass
class AstNode:
    """Internal AST node; only the fields meaningful for `type` are set."""
    type:       str
    children:   list["AstNode"] = field(default_factory=list)
    value:      Optional[str] = None     # text, code, html, inlineCode, esm
    url:        Optional[str] = None     # link / image target
    title:      Optional[str] = None
    alt:        Optional[str] = None
    depth:      Optional[int] = None     # heading level
    ordered:    Optional[bool] = None
    start:      Optional[int] = None     # ordered list start number
    lang:       Optional[str] = None
    meta:       Optional[str] = None     # fence info after the language
    checked:    Optional[bool] = None    # task list items only
    identifier: Optional[str] = None     # footnotes
    name:       Optional[str] = None     # jsx elements
    attributes: list[JsxAttribute] = field(default_factory=list)

    def attr(self, name: str) -> Optional[str]:
        """Return the value of attribute `name`, or None when absent/boolean."""
        for a in self.attributes:
            if a.name == name:
                return a.value
        return None
