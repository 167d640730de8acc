"""JSX tag scanning, attribute escaping, and re-serialization of AST fragments"""

import html
import re
from typing import NamedTuple, Optional

from mdxdoc.core.ast import AstNode, JsxAttribute


_NAME = r"[A-Za-z][\w.:-]*"
_ATTR_NAME = r"[^\s=/>\"'{}<]+"
_EXPRESSION = r"\{(?:[^{}]|\{[^{}]*\})*\}"
_UNQUOTED = r"(?:[^\s\"'=<>`{}/]|/(?!>))+"
_ATTR_VALUE = rf"(?:\"[^\"]*\"|'[^']*'|{_EXPRESSION}|{_UNQUOTED})"

TAG_RE = re.compile(
    rf"<(?P<closing>/)?(?P<name>{_NAME})"
    rf"(?P<attrs>(?:\s+{_ATTR_NAME}(?:\s*=\s*{_ATTR_VALUE})?)*)"
    r"\s*(?P<self_closing>/)?>"
)
ATTR_RE = re.compile(
    rf"(?P<name>{_ATTR_NAME})(?:\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'"
    rf"|\{{(?P<expr>(?:[^{{}}]|\{{[^{{}}]*\}})*)\}}|(?P<bare>{_UNQUOTED})))?"
)

VOID_ELEMENTS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
}

# Lowercase tags that form flow elements when alone in a paragraph
FLOW_TAGS = {"details", "dl"}

# AST kinds that live at flow (block) level
FLOW_TYPES = {
    "paragraph", "heading", "blockquote", "list", "listItem", "code", "thematicBreak",
    "table", "tableRow", "html", "jsxFlowElement", "footnoteDefinition", "esm",
}


class Tag(NamedTuple):
    name:         str
    attributes:   list[JsxAttribute]
    closing:      bool
    self_closing: bool
    start:        int
    end:          int


def escape_attr_value(value: str) -> str:
    """Escape a string for use inside a double-quoted JSX attribute."""
    return (value
            .replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace("\\", "\\\\")
            .replace('"', "&quot;")
            .replace("{", "&#123;")
            .replace("}", "&#125;"))


def unescape_attr_value(value: str) -> str:
    """Inverse of escape_attr_value."""
    return html.unescape(value.replace("\\\\", "\\"))


def parse_attributes(src: str) -> list[JsxAttribute]:
    attrs = []
    for m in ATTR_RE.finditer(src):
        if m.group("expr") is not None:
            attrs.append(JsxAttribute(m.group("name"), m.group("expr").strip(), expression=True))
        elif m.group("dq") is not None or m.group("sq") is not None:
            raw = m.group("dq") if m.group("dq") is not None else m.group("sq")
            attrs.append(JsxAttribute(m.group("name"), unescape_attr_value(raw)))
        elif m.group("bare") is not None:
            attrs.append(JsxAttribute(m.group("name"), m.group("bare")))
        else:
            attrs.append(JsxAttribute(m.group("name")))
    return attrs


def match_tag(text: str, pos: int = 0) -> Optional[Tag]:
    """Match a single opening, closing or self-closing tag at `pos`."""
    m = TAG_RE.match(text, pos)
    if not m:
        return None
    name = m.group("name")
    closing = bool(m.group("closing"))
    self_closing = not closing and (bool(m.group("self_closing")) or name.lower() in VOID_ELEMENTS)
    return Tag(
        name=name,
        attributes=[] if closing else parse_attributes(m.group("attrs")),
        closing=closing,
        self_closing=self_closing,
        start=m.start(),
        end=m.end(),
    )


def is_flow_name(name: str) -> bool:
    """Components and FLOW_TAGS stand alone at flow level; other lowercase tags stay inline."""
    return name[:1].isupper() or name in FLOW_TAGS


def extract_text(node: AstNode) -> str:
    """Concatenate all literal text below `node`."""
    if node.value:
        return node.value
    return "".join(extract_text(c) for c in node.children)


def serialize_attribute(attr: JsxAttribute) -> str:
    if attr.value is None:
        return attr.name
    if attr.expression:
        return f"{attr.name}={{{attr.value}}}"
    return f'{attr.name}="{escape_attr_value(attr.value)}"'


def serialize_element(node: AstNode) -> str:
    """Re-serialize a JSX element (and everything inside it) to MDX text."""
    name = node.name or "unknown"
    attrs = " ".join(serialize_attribute(a) for a in node.attributes)
    open_tag = f"<{name} {attrs}" if attrs else f"<{name}"
    if not node.children:
        return f"{open_tag} />"

    blocks = [c for c in node.children if c.type in FLOW_TYPES]
    if len(blocks) == 1 and blocks[0].type == "paragraph" and len(node.children) == 1:
        return f"{open_tag}>{serialize_children(blocks[0])}</{name}>"
    if len(node.children) == 1 and _inline_element(node.children[0]):
        return f"{open_tag}>{serialize_element(node.children[0])}</{name}>"
    if blocks:
        return f"{open_tag}>\n\n{serialize_children(node)}\n\n</{name}>"
    return f"{open_tag}>{serialize_children(node)}</{name}>"


def _inline_element(node: AstNode) -> bool:
    """A plain html element on one line re-parses as inline content of its parent."""
    return (node.type == "jsxFlowElement" and not is_flow_name(node.name or "")
            and "\n" not in serialize_element(node))


def serialize_children(node: AstNode) -> str:
    sep = "\n\n" if any(c.type in FLOW_TYPES for c in node.children) else ""
    return sep.join(serialize_node(c) for c in node.children)


def _fence(value: str, lang: str) -> str:
    longest = max((len(run) for run in re.findall(r"`+", value)), default=0)
    ticks = "`" * max(3, longest + 1)
    return f"{ticks}{lang}\n{value}\n{ticks}"


def _serialize_list(node: AstNode) -> str:
    lines = []
    for i, item in enumerate(node.children):
        marker = f"{(node.start or 1) + i}. " if node.ordered else "- "
        if item.checked is not None:
            marker += "[x] " if item.checked else "[ ] "
        pad = " " * (len(marker) if item.checked is None else 2)
        body = serialize_children(item).split("\n")
        lines.append(marker + body[0])
        lines.extend(pad + line if line else line for line in body[1:])
    return "\n".join(lines)


def _serialize_table(node: AstNode) -> str:
    rows = [[serialize_children(cell).replace("|", "\\|") for cell in row.children]
            for row in node.children]
    if not rows:
        return ""
    lines = [f"| {' | '.join(rows[0])} |", f"| {' | '.join('---' for _ in rows[0])} |"]
    lines.extend(f"| {' | '.join(cells)} |" for cells in rows[1:])
    return "\n".join(lines)


def serialize_node(node: AstNode) -> str:
    """Serialize a generic AST node back to Markdown/MDX text."""
    match node.type:
        case "text" | "html" | "esm":
            return node.value or ""
        case "emphasis":
            return f"*{serialize_children(node)}*"
        case "strong":
            return f"**{serialize_children(node)}**"
        case "delete":
            return f"~~{serialize_children(node)}~~"
        case "mark":
            return f"=={serialize_children(node)}=="
        case "inlineCode":
            return f"`{node.value or ''}`"
        case "link":
            return f"[{serialize_children(node)}]({node.url or ''})"
        case "image":
            return f"![{node.alt or ''}]({node.url or ''})"
        case "break":
            return "  \n"
        case "footnoteReference":
            return f"[^{node.identifier or ''}]"
        case "footnoteDefinition":
            return f"[^{node.identifier or ''}]: {serialize_children(node)}"
        case "paragraph":
            return serialize_children(node)
        case "heading":
            return f"{'#' * (node.depth or 1)} {serialize_children(node)}"
        case "code":
            return _fence(node.value or "", node.lang or "")
        case "thematicBreak":
            return "---"
        case "blockquote":
            return "\n".join(f"> {line}" for line in serialize_children(node).split("\n"))
        case "list":
            return _serialize_list(node)
        case "table":
            return _serialize_table(node)
        case "jsxFlowElement" | "jsxTextElement":
            return serialize_element(node)
        case _:
            return node.value if node.value else serialize_children(node)
