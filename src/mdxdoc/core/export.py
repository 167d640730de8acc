"""Document -> MDX serialization: block chunks, mark wrapping, and component tags"""

import logging
import re
from typing import Callable

from mdxdoc.core.jsx import escape_attr_value
from mdxdoc.core.models import (
    Blockquote,
    BulletList,
    CodeBlock,
    DescriptionDetails,
    DescriptionList,
    DescriptionTerm,
    Details,
    Document,
    Figure,
    FootnoteDef,
    FootnoteRef,
    HardBreak,
    Heading,
    HorizontalRule,
    Image,
    LinkMark,
    ListItem,
    Mark,
    MermaidDiagram,
    Node,
    OrderedList,
    Paragraph,
    PassthroughBlock,
    Table,
    TableCell,
    TableHeader,
    TableRow,
    TaskItem,
    TaskList,
    Text,
    TwitterCard,
    YoutubeEmbed,
)


logger = logging.getLogger(__name__)

# Nesting order for marks opened on the same node, outermost first.
# `code` is always innermost: markup inside a code span is literal.
MARK_ORDER = ('bold', 'italic', 'strike', 'link', 'underline', 'highlight')

LIST_TYPES = (BulletList, OrderedList, TaskList)

# Text that would re-parse as inline markup; `_` only where it can delimit
INLINE_ESCAPE_RE = re.compile(r'[\\*`\[\]~]|=(?==)|<(?=[A-Za-z/!?])|&(?=#?\w+;)|(?<![^\W_])_|_(?![^\W_])')
# Line starts that would re-parse as a block marker
BLOCK_MARKER_RE = re.compile(r'^(?:#{1,6}(?=[ \t]|$)|>|[-+](?=[ \t]|$)|[-=](?=[-= \t]*$))', re.M)
ORDERED_MARKER_RE = re.compile(r'^(\d{1,9})([.)])(?=[ \t]|$)', re.M)
BACKTICKS_RE = re.compile(r'`+')


def serialize_document(doc: Document) -> str:
    """Serialize top-level blocks, separated by blank lines."""
    return "\n\n".join(chunk for chunk in (serialize_block(n) for n in doc.children) if chunk)


def serialize_block(node: Node) -> str:
    serializer = BLOCK_SERIALIZERS.get(type(node))
    if serializer is None:
        logger.debug("No serializer for node kind %s; dropped", getattr(node, 'kind', type(node).__name__))
        return ""
    return serializer(node)


def _blocks(nodes: list[Node], sep: str = "\n\n") -> str:
    return sep.join(serialize_block(n) for n in nodes)


# --- lists ---

def _serialize_item(children: list[Node], marker: str, pad: str) -> str:
    """One list item: marker on the first line, continuation lines indented by `pad`."""
    parts = []
    for i, child in enumerate(children):
        text = serialize_block(child)
        if i == 0:
            parts.append(text)
        elif isinstance(child, LIST_TYPES):
            parts.append("\n" + text)
        else:
            parts.append("\n\n" + text)
    lines = "".join(parts).split("\n")
    rest = [pad + line if line else line for line in lines[1:]]
    return "\n".join([marker + lines[0], *rest])


def _bullet_list(node: BulletList) -> str:
    return "\n".join(_serialize_item(item.children, "- ", "  ") for item in node.children)


def _ordered_list(node: OrderedList) -> str:
    items = []
    for i, item in enumerate(node.children):
        marker = f"{node.start + i}. "
        items.append(_serialize_item(item.children, marker, " " * len(marker)))
    return "\n".join(items)


def _task_list(node: TaskList) -> str:
    return "\n".join(_task_item(item) for item in node.children)


def _task_item(item: TaskItem) -> str:
    # Continuations align with the list marker, not the checkbox
    return _serialize_item(item.children, "- [x] " if item.checked else "- [ ] ", "  ")


# --- simple blocks ---

def _fence(text: str, language: str) -> str:
    longest = max((len(run) for run in BACKTICKS_RE.findall(text)), default=0)
    ticks = "`" * max(3, longest + 1)
    return f"{ticks}{language}\n{text}\n{ticks}"


def _heading(node: Heading) -> str:
    return f"{'#' * node.level} {serialize_inline(node.content)}"


def _blockquote(node: Blockquote) -> str:
    return "\n".join(f"> {line}" for line in _blocks(node.children).split("\n"))


def _image(node: Image) -> str:
    title = f' "{node.title}"' if node.title else ""
    image = f"![{node.alt}]({_destination(node.src)}{title})"
    return f"[{image}]({_destination(node.href)})" if node.href else image


# --- components ---

def _jsx_number(name: str, value: str) -> str:
    if re.fullmatch(r'\d+(?:\.\d+)?', value):
        return f"{name}={{{value}}}"
    return f'{name}="{escape_attr_value(value)}"'


def _figure(node: Figure) -> str:
    pairs = [f'src="{escape_attr_value(node.src)}"', f'alt="{escape_attr_value(node.alt)}"']
    if node.width:
        pairs.append(_jsx_number("width", node.width))
    if node.height:
        pairs.append(_jsx_number("height", node.height))
    if node.label:
        pairs.append(f'label="{escape_attr_value(node.label)}"')
    if node.caption:
        pairs.append(f'caption="{escape_attr_value(node.caption)}"')
    return f"<Figure {' '.join(pairs)} />"


def _youtube(node: YoutubeEmbed) -> str:
    return (f'<LiteYouTube videoId="{escape_attr_value(node.video_id)}" '
            f'title="{escape_attr_value(node.title)}" />')


def _twitter_card(node: TwitterCard) -> str:
    return f'<TwitterCard id="{escape_attr_value(node.id)}" />'


def _details(node: Details) -> str:
    inner = _blocks(node.children)
    return f"<details>\n<summary>{escape_attr_value(node.summary)}</summary>\n\n{inner}\n\n</details>"


def _footnote_def(node: FootnoteDef) -> str:
    return f"[^{node.identifier}]: {serialize_inline(node.content)}"


def _cell(cell: TableHeader | TableCell) -> str:
    """Inline text of the cell's single paragraph, pipes escaped."""
    if not cell.children:
        return ""
    return serialize_inline(cell.children[0].content).replace("|", "\\|")


def _row(row: TableRow) -> str:
    return f"| {' | '.join(_cell(c) for c in row.children)} |"


def _table(node: Table) -> str:
    header, *body = node.children
    separator = f"| {' | '.join('---' for _ in header.children)} |"
    table = "\n".join([_row(header), separator, *(_row(r) for r in body)])
    if not (node.label or node.caption):
        return table
    attrs = []
    if node.label:
        attrs.append(f'label="{escape_attr_value(node.label)}"')
    if node.caption:
        attrs.append(f'caption="{escape_attr_value(node.caption)}"')
    return f"<Table {' '.join(attrs)}>\n{table}\n</Table>"


def _description_list(node: DescriptionList) -> str:
    parts = _blocks(node.children, sep="\n")
    return f"<dl>\n{parts}\n</dl>"


def _description_term(node: DescriptionTerm) -> str:
    return f"  <dt>{serialize_inline(node.content)}</dt>"


def _description_details(node: DescriptionDetails) -> str:
    inner = _blocks(node.children, sep="\n")
    return f"  <dd>{inner}</dd>"


# --- inline ---

def _destination(href: str) -> str:
    return f"<{href}>" if " " in href else href


def _escape_text(text: str, line_start: bool = True) -> str:
    """Backslash-escape literal text; block markers only where a line begins."""
    text = INLINE_ESCAPE_RE.sub(r"\\\g<0>", text)
    head, newline, rest = ("", "", text) if line_start else text.partition("\n")
    rest = ORDERED_MARKER_RE.sub(r"\1\\\2", BLOCK_MARKER_RE.sub(r"\\\g<0>", rest))
    return head + newline + rest


def _code_span(text: str) -> str:
    longest = max((len(run) for run in BACKTICKS_RE.findall(text)), default=0)
    ticks = "`" * (longest + 1)
    padded = text.startswith("`") or text.endswith("`") or (
        text.startswith(" ") and text.endswith(" ") and text.strip() != "")
    return f"{ticks} {text} {ticks}" if padded else f"{ticks}{text}{ticks}"


def _span_marks(node: Node) -> list[Mark]:
    """Marks that may span several adjacent nodes (everything but code/inlineJsx)."""
    if not isinstance(node, Text):
        return []
    return [m for m in node.marks if m.type not in ("code", "inlineJsx")]


def _delimiters(mark: Mark, with_bold: bool) -> tuple[str, str]:
    match mark.type:
        case "bold":
            return "**", "**"
        case "italic":
            return ("_", "_") if with_bold else ("*", "*")
        case "strike":
            return "~~", "~~"
        case "link":
            return "[", f"]({_destination(mark.href if isinstance(mark, LinkMark) else '')})"
        case "underline":
            return "<u>", "</u>"
        case "highlight":
            return "==", "=="
    return "", ""


def _inline_atom(node: Node) -> str:
    if isinstance(node, Image):
        return _image(node)
    if isinstance(node, FootnoteRef):
        return f"[^{node.identifier}]"
    if isinstance(node, HardBreak):
        return "  \n"
    logger.debug("No inline serializer for %s", getattr(node, 'kind', type(node).__name__))
    return ""


def serialize_inline(nodes: list[Node]) -> str:
    """Serialize an inline run; marks shared by neighbours open and close once."""
    out: list[str] = []
    active: list[tuple[Mark, str]] = []      # open marks with their closing delimiter

    for i, node in enumerate(nodes):
        if not isinstance(node, Text):
            out.append(_inline_atom(node))
            continue

        marks = _span_marks(node)
        raw = node.has_mark("inlineJsx")
        ordered = [m for m, _ in active]
        if not raw and node.text.strip():
            opening_marks = sorted((m for m in marks if m not in ordered), key=lambda m: MARK_ORDER.index(m.type))
        else:
            opening_marks = []

        with_bold = any(m.type == "bold" for m in opening_marks)
        opening = []
        for mark in opening_marks:
            start, end = _delimiters(mark, with_bold)
            opening.append(start)
            active.append((mark, end))

        following = _span_marks(nodes[i + 1]) if i + 1 < len(nodes) else []
        keep = 0
        while keep < len(active) and active[keep][0] in following:
            keep += 1
        closing = "".join(end for _, end in reversed(active[keep:]))
        del active[keep:]

        text = node.text
        if raw:
            body, lead, trail = text, "", ""
        elif node.has_mark("code"):
            body, lead, trail = _code_span(text), "", ""
        else:
            stripped_left = text.lstrip() if opening else text
            lead = text[:len(text) - len(stripped_left)]
            core = stripped_left.rstrip() if closing else stripped_left
            trail = stripped_left[len(core):]
            line_start = not opening and (not out or out[-1].endswith("\n"))
            body = _escape_text(core, line_start)
        out.append(f"{lead}{''.join(opening)}{body}{closing}{trail}")

    return "".join(out)


def _paragraph(node: Paragraph) -> str:
    return serialize_inline(node.content)


BLOCK_SERIALIZERS: dict[type, Callable] = {
    Paragraph:          _paragraph,
    Heading:            _heading,
    Blockquote:         _blockquote,
    BulletList:         _bullet_list,
    OrderedList:        _ordered_list,
    TaskList:           _task_list,
    ListItem:           lambda node: _serialize_item(node.children, "- ", "  "),
    TaskItem:           _task_item,
    CodeBlock:          lambda node: _fence(node.text, node.language or ""),
    MermaidDiagram:     lambda node: _fence(node.text, "mermaid"),
    HorizontalRule:     lambda node: "---",
    Image:              _image,
    Figure:             _figure,
    YoutubeEmbed:       _youtube,
    TwitterCard:        _twitter_card,
    Details:            _details,
    FootnoteDef:        _footnote_def,
    PassthroughBlock:   lambda node: node.content,
    Table:              _table,
    TableRow:           _row,
    TableHeader:        _cell,
    TableCell:          _cell,
    DescriptionList:    _description_list,
    DescriptionTerm:    _description_term,
    DescriptionDetails: _description_details,
}
