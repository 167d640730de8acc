"""AST -> Document mapping: recognized components become typed nodes, the rest passes through"""

import logging
from typing import Callable, Optional

from mdxdoc.core.ast import AstNode
from mdxdoc.core.jsx import extract_text, serialize_element
from mdxdoc.core.models import (
    Block,
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
    Inline,
    LinkMark,
    ListItem,
    Mark,
    MermaidDiagram,
    OrderedList,
    Paragraph,
    PassthroughBlock,
    SimpleMark,
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

# Inline tags that carry a mark rather than staying raw JSX
MARK_TAGS = {'u': 'underline', 'mark': 'highlight'}

INLINE_AST_TYPES = {
    'text', 'strong', 'emphasis', 'delete', 'mark', 'inlineCode',
    'link', 'image', 'break', 'footnoteReference', 'jsxTextElement',
}


def ast_to_document(root: AstNode) -> Document:
    """Map a parsed `root` AstNode to a Document; never raises on unknown input."""
    return Document(children=map_blocks(root.children))


def map_blocks(nodes: list[AstNode]) -> list[Block]:
    return [b for b in (map_block(n) for n in nodes) if b is not None]


def map_block(node: AstNode) -> Optional[Block]:
    """Map one flow-level AST node; None means 'drop'."""
    handler = BLOCK_HANDLERS.get(node.type)
    if handler is not None:
        return handler(node)
    if node.value:
        logger.debug("Unknown block %s degraded to paragraph", node.type)
        return Paragraph(content=[Text(text=node.value)])
    logger.debug("Unknown block %s dropped", node.type)
    return None


# --- block handlers ---

def _paragraph(node: AstNode) -> Optional[Paragraph]:
    content = map_inline_children(node)
    return Paragraph(content=content) if content else None


def _heading(node: AstNode) -> Heading:
    return Heading(level=node.depth or 2, content=map_inline_children(node))


def _blockquote(node: AstNode) -> Blockquote:
    return Blockquote(children=map_blocks(node.children))


def _list(node: AstNode) -> Block:
    items = node.children
    if any(item.checked is not None for item in items):
        return TaskList(children=[
            TaskItem(checked=item.checked is True, children=map_blocks(item.children))
            for item in items
        ])
    list_items = [ListItem(children=map_blocks(item.children)) for item in items]
    if node.ordered:
        return OrderedList(start=node.start or 1, children=list_items)
    return BulletList(children=list_items)


def _list_item(node: AstNode) -> ListItem:
    return ListItem(children=map_blocks(node.children))


def _code(node: AstNode) -> Block:
    if node.lang == 'mermaid':
        return MermaidDiagram(text=node.value or '')
    return CodeBlock(language=node.lang, text=node.value or '')


def _image(node: AstNode) -> Image:
    return Image(src=node.url or '', alt=node.alt or '', title=node.title)


def _table(node: AstNode) -> Table:
    rows = []
    for i, row in enumerate(node.children):
        cell_type = TableHeader if i == 0 else TableCell
        rows.append(TableRow(children=[
            cell_type(children=[Paragraph(content=map_inline_children(cell))])
            for cell in row.children
        ]))
    return Table(children=rows)


def _footnote_definition(node: AstNode) -> FootnoteDef:
    content: list[Inline] = []
    for child in node.children:
        if child.type != 'paragraph':
            continue
        inline = map_inline_children(child)
        if content and inline:
            content.append(HardBreak())
        content.extend(inline)
    return FootnoteDef(identifier=node.identifier or '', content=content)


def _html(node: AstNode) -> PassthroughBlock:
    return PassthroughBlock(content=node.value or '')


def _esm(node: AstNode) -> None:
    logger.debug("Dropped ESM statement: %s", (node.value or '')[:40])
    return None


def _jsx(node: AstNode) -> Optional[Block]:
    handler = COMPONENT_HANDLERS.get(node.name or '')
    if handler is not None:
        mapped = handler(node)
        if mapped is not None:
            return mapped
    return PassthroughBlock(content=serialize_element(node))


# --- component handlers ---

def _attr(node: AstNode, *names: str, default: str = '') -> str:
    """First present attribute among `names`."""
    for name in names:
        value = node.attr(name)
        if value is not None:
            return value
    return default


def _youtube(node: AstNode) -> YoutubeEmbed:
    return YoutubeEmbed(
        video_id=_attr(node, 'videoId', 'videoid', 'VideoId', 'videoID'),
        title=_attr(node, 'title'),
    )


def _figure(node: AstNode) -> Figure:
    return Figure(
        src=_attr(node, 'src'),
        alt=_attr(node, 'alt'),
        caption=_attr(node, 'caption'),
        label=_attr(node, 'label'),
        width=_attr(node, 'width'),
        height=_attr(node, 'height'),
    )


def _twitter_card(node: AstNode) -> TwitterCard:
    return TwitterCard(id=_attr(node, 'id'))


def _table_wrapper(node: AstNode) -> Optional[Table]:
    """<Table label caption> around a markdown table; None falls back to passthrough."""
    inner = next((c for c in node.children if c.type == 'table'), None)
    if inner is None:
        return None
    table = _table(inner)
    table.label = node.attr('label') or None
    table.caption = node.attr('caption') or None
    return table


def _is_summary(node: AstNode) -> bool:
    if node.type == 'jsxFlowElement' and node.name == 'summary':
        return True
    return (node.type == 'paragraph' and len(node.children) == 1
            and node.children[0].type == 'jsxTextElement' and node.children[0].name == 'summary')


def _details(node: AstNode) -> Details:
    summary_node = next((c for c in node.children if _is_summary(c)), None)
    summary = 'Details'
    if summary_node is not None:
        target = summary_node if summary_node.type == 'jsxFlowElement' else summary_node.children[0]
        summary = extract_text(target)
    body = map_blocks([c for c in node.children if not _is_summary(c)])
    return Details(summary=summary, children=body or [Paragraph()])


def _unwrap_paragraphs(nodes: list[AstNode]) -> list[AstNode]:
    flat = []
    for child in nodes:
        flat.extend(child.children if child.type == 'paragraph' else [child])
    return flat


def _description_list(node: AstNode) -> DescriptionList:
    parts = [map_block(c) for c in _unwrap_paragraphs(node.children)]
    return DescriptionList(children=[
        p for p in parts if isinstance(p, (DescriptionTerm, DescriptionDetails))
    ])


def _description_term(node: AstNode) -> DescriptionTerm:
    return DescriptionTerm(content=map_inline_nodes(_unwrap_paragraphs(node.children)))


def _description_details(node: AstNode) -> DescriptionDetails:
    if node.children and all(c.type in INLINE_AST_TYPES for c in node.children):
        # The grammar produced bare inline content
        inline = map_inline_children(node)
        return DescriptionDetails(children=[Paragraph(content=inline)])
    return DescriptionDetails(children=map_blocks(node.children) or [Paragraph()])


# --- inline mapping ---

def map_inline_children(node: AstNode) -> list[Inline]:
    return map_inline_nodes(node.children)


def map_inline_nodes(nodes: list[AstNode]) -> list[Inline]:
    result: list[Inline] = []
    for child in nodes:
        result.extend(map_inline(child))
    return result


def map_inline(node: AstNode) -> list[Inline]:
    match node.type:
        case 'text':
            return [Text(text=node.value)] if node.value else []
        case 'strong':
            return apply_mark(map_inline_children(node), SimpleMark(type='bold'))
        case 'emphasis':
            return apply_mark(map_inline_children(node), SimpleMark(type='italic'))
        case 'delete':
            return apply_mark(map_inline_children(node), SimpleMark(type='strike'))
        case 'mark':
            return apply_mark(map_inline_children(node), SimpleMark(type='highlight'))
        case 'inlineCode':
            return [Text(text=node.value or '', marks=[SimpleMark(type='code')])]
        case 'link':
            return apply_mark(map_inline_children(node), LinkMark(href=node.url or '', target='_blank'))
        case 'image':
            return [_image(node)]
        case 'break':
            return [HardBreak()]
        case 'footnoteReference':
            return [FootnoteRef(identifier=node.identifier or '')]
        case 'jsxTextElement' | 'jsxFlowElement':
            if node.name in MARK_TAGS and not node.attributes:
                return apply_mark(map_inline_nodes(_unwrap_paragraphs(node.children)),
                                  SimpleMark(type=MARK_TAGS[node.name]))
            return [Text(text=serialize_element(node), marks=[SimpleMark(type='inlineJsx')])]
        case 'html':
            # Unpaired inline tag: keep it verbatim
            return [Text(text=node.value, marks=[SimpleMark(type='inlineJsx')])] if node.value else []
        case _:
            if node.value:
                return [Text(text=node.value)]
            return []


def apply_mark(nodes: list[Inline], mark: Mark) -> list[Inline]:
    """Add `mark` to every text node in `nodes` (no-op where already present).

    Images inside a link take the link target as their `href`.
    """
    for node in nodes:
        if isinstance(node, Image) and isinstance(mark, LinkMark) and node.href is None:
            node.href = mark.href
        if isinstance(node, Text) and mark not in node.marks:
            node.marks = [*node.marks, mark]
    return nodes


BLOCK_HANDLERS: dict[str, Callable[[AstNode], Optional[Block]]] = {
    'paragraph':          _paragraph,
    'heading':            _heading,
    'blockquote':         _blockquote,
    'list':               _list,
    'listItem':           _list_item,
    'code':               _code,
    'thematicBreak':      lambda node: HorizontalRule(),
    'image':              _image,
    'table':              _table,
    'footnoteDefinition': _footnote_definition,
    'html':               _html,
    'esm':                _esm,
    'jsxFlowElement':     _jsx,
    'jsxTextElement':     _jsx,
}

COMPONENT_HANDLERS: dict[str, Callable[[AstNode], Optional[Block]]] = {
    'LiteYouTube': _youtube,
    'Figure':      _figure,
    'TwitterCard': _twitter_card,
    'Table':       _table_wrapper,
    'details':     _details,
    'dl':          _description_list,
    'dt':          _description_term,
    'dd':          _description_details,
}
