"""Markdown/MDX body parsing: markdown-it tokens lifted into a generic AST with JSX elements"""

import logging
import re
import textwrap
from functools import cache
from typing import Any, MutableMapping

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from mdxdoc.core.ast import AstNode
from mdxdoc.core.jsx import Tag, is_flow_name, match_tag
from mdxdoc.core.utils.mark import mark_rule
from mdxdoc.core.utils.tokens import footnote_label, heading_level, inline_children


logger = logging.getLogger(__name__)

ESM_RE = re.compile(r'^(?:import|export)\s')

INLINE_CONTAINERS = {'em': 'emphasis', 'strong': 'strong', 's': 'delete', 'mark': 'mark'}


class MdxSyntaxError(ValueError):
    """Unbalanced component tags at flow level."""


@cache
def _make_parser() -> MarkdownIt:
    """Build the shared MarkdownIt instance (GFM tables/strikethrough, footnotes, task items, ==mark==)."""
    md = MarkdownIt('gfm-like', options_update={'linkify': False})
    md.use(footnote_plugin)
    md.use(tasklists_plugin)
    md.use(mark_rule)
    # Keep footnote definitions where they are written (and unreferenced ones at all)
    md.disable(['footnote_tail', 'footnote_inline'], ignoreInvalid=True)
    return md


def parse_body(body: str) -> AstNode:
    """Parse an MDX body (no frontmatter) into a `root` AstNode."""
    env: dict[str, Any] = {}
    return AstNode('root', children=_parse_blocks(body, env, top_level=True))


def _parse_blocks(src: str, env: MutableMapping, top_level: bool = False) -> list[AstNode]:
    tree = SyntaxTreeNode(_make_parser().parse(src, env))
    return _convert_blocks(tree.children, env, top_level)


def _convert_blocks(nodes: list[SyntaxTreeNode], env: MutableMapping, top_level: bool = False) -> list[AstNode]:
    builder = _FlowBuilder(env)
    for node in nodes:
        if node.type == 'html_block':
            builder.feed_html(node.content)
            continue
        for converted in _convert_block(node, env, top_level):
            builder.add(converted)
    return builder.finish()


def _convert_block(node: SyntaxTreeNode, env: MutableMapping, top_level: bool) -> list[AstNode]:
    match node.type:
        case 'paragraph':
            raw = ''.join(c.content for c in node.children if c.type == 'inline')
            if top_level and ESM_RE.match(raw):
                return [AstNode('esm', value=raw)]
            return [_promote(AstNode('paragraph', children=_convert_inline(inline_children(node))))]
        case 'heading':
            return [AstNode('heading', depth=heading_level(node),
                            children=_convert_inline(inline_children(node)))]
        case 'blockquote':
            return [AstNode('blockquote', children=_convert_blocks(node.children, env))]
        case 'bullet_list' | 'ordered_list':
            ordered = node.type == 'ordered_list'
            return [AstNode(
                'list',
                ordered=ordered,
                start=int(node.attrs.get('start', 1)) if ordered else None,
                children=[_convert_list_item(item, env) for item in node.children],
            )]
        case 'fence' | 'code_block':
            info = node.info.strip().split(maxsplit=1) if node.type == 'fence' else []
            value = node.content[:-1] if node.content.endswith('\n') else node.content
            return [AstNode(
                'code',
                value=value,
                lang=info[0] if info else None,
                meta=info[1] if len(info) > 1 else None,
            )]
        case 'hr':
            return [AstNode('thematicBreak')]
        case 'table':
            return [_convert_table(node)]
        case 'footnote_reference':
            return [AstNode('footnoteDefinition', identifier=footnote_label(node.meta),
                            children=_convert_blocks(node.children, env))]
        case 'footnote_block':
            return [
                AstNode('footnoteDefinition', identifier=footnote_label(fn.meta),
                        children=_convert_blocks(fn.children, env))
                for fn in node.children if fn.type == 'footnote'
            ]
        case _:
            logger.debug("Unhandled block token %s", node.type)
            content = node.content if not node.children else ''
            return [AstNode(node.type, value=content)] if content else []


def _convert_list_item(node: SyntaxTreeNode, env: MutableMapping) -> AstNode:
    checked = _pop_checkbox(node)
    return AstNode('listItem', checked=checked, children=_convert_blocks(node.children, env))


def _pop_checkbox(item: SyntaxTreeNode) -> bool | None:
    """Remove the tasklists checkbox token from a task item; None for plain items."""
    if 'task-list-item' not in str(item.attrs.get('class', '')):
        return None
    inline = inline_children(item.children[0])
    checkbox = inline.pop(0)
    if inline and inline[0].type == 'text':
        inline[0].token.content = inline[0].content.lstrip()
    return 'checked="checked"' in checkbox.content


def _convert_table(node: SyntaxTreeNode) -> AstNode:
    rows = []
    for section in node.children:                    # thead / tbody
        for tr in section.children:
            cells = [AstNode('tableCell', children=_convert_inline(inline_children(cell)))
                     for cell in tr.children]
            rows.append(AstNode('tableRow', children=cells))
    return AstNode('table', children=rows)


def _convert_inline(nodes: list[SyntaxTreeNode]) -> list[AstNode]:
    out: list[AstNode] = []
    for node in nodes:
        match node.type:
            case 'text' | 'text_special':
                if node.content:
                    out.append(AstNode('text', value=node.content))
            case 'softbreak':
                out.append(AstNode('text', value='\n'))
            case 'hardbreak':
                out.append(AstNode('break'))
            case 'code_inline':
                out.append(AstNode('inlineCode', value=node.content))
            case 'em' | 'strong' | 's' | 'mark':
                out.append(AstNode(INLINE_CONTAINERS[node.type], children=_convert_inline(node.children)))
            case 'link':
                out.append(AstNode(
                    'link',
                    url=str(node.attrs.get('href', '')),
                    title=node.attrs.get('title'),
                    children=_convert_inline(node.children),
                ))
            case 'image':
                out.append(AstNode(
                    'image',
                    url=str(node.attrs.get('src', '')),
                    alt=node.content,
                    title=node.attrs.get('title'),
                ))
            case 'html_inline':
                out.append(AstNode('html', value=node.content))
            case 'footnote_ref':
                out.append(AstNode('footnoteReference', identifier=footnote_label(node.meta)))
            case 'footnote_anchor':
                continue
            case _:
                logger.debug("Unhandled inline token %s", node.type)
                if node.content:
                    out.append(AstNode('text', value=node.content))
    return _merge_text(_group_inline(out))


def _whole_tag(node: AstNode) -> Tag | None:
    """Return the tag if `node` is raw html consisting of exactly one tag."""
    if node.type != 'html' or not node.value:
        return None
    tag = match_tag(node.value)
    return tag if tag and tag.end == len(node.value) else None


def _group_inline(nodes: list[AstNode]) -> list[AstNode]:
    """Pair inline open/close tags into jsxTextElements; unmatched tags stay raw html."""
    frames: list[tuple[AstNode | None, AstNode | None, list[AstNode]]] = [(None, None, [])]

    def unwind() -> None:
        _, raw, kids = frames.pop()
        frames[-1][2].append(raw)
        frames[-1][2].extend(kids)

    for node in nodes:
        tag = _whole_tag(node)
        if tag is None:
            frames[-1][2].append(node)
        elif tag.closing:
            depth = next((i for i in range(len(frames) - 1, 0, -1) if frames[i][0].name == tag.name), None)
            if depth is None:
                frames[-1][2].append(node)
                continue
            while len(frames) > depth + 1:
                unwind()
            element, _, kids = frames.pop()
            element.children = _merge_text(kids)
            frames[-1][2].append(element)
        elif tag.self_closing:
            frames[-1][2].append(AstNode('jsxTextElement', name=tag.name, attributes=tag.attributes))
        else:
            frames.append((AstNode('jsxTextElement', name=tag.name, attributes=tag.attributes), node, []))

    while len(frames) > 1:
        unwind()
    return frames[0][2]


def _merge_text(nodes: list[AstNode]) -> list[AstNode]:
    merged: list[AstNode] = []
    for node in nodes:
        if node.type == 'text' and merged and merged[-1].type == 'text':
            merged[-1] = AstNode('text', value=(merged[-1].value or '') + (node.value or ''))
        else:
            merged.append(node)
    return merged


def _promote(paragraph: AstNode) -> AstNode:
    """A paragraph holding nothing but one component element becomes a flow element."""
    significant = [c for c in paragraph.children if not (c.type == 'text' and not (c.value or '').strip())]
    if len(significant) != 1:
        return paragraph
    el = significant[0]
    if el.type != 'jsxTextElement' or not is_flow_name(el.name or ''):
        return paragraph
    children = [AstNode('paragraph', children=el.children)] if el.children else []
    return AstNode('jsxFlowElement', name=el.name, attributes=el.attributes, children=children)


class _FlowBuilder:
    """Balances flow-level component tags across sibling blocks of one container."""

    def __init__(self, env: MutableMapping):
        self.env = env
        self.root: list[AstNode] = []
        self.stack: list[AstNode] = []

    def _target(self) -> list[AstNode]:
        return self.stack[-1].children if self.stack else self.root

    def _is_open(self, name: str) -> bool:
        return any(el.name == name for el in self.stack)

    def open(self, tag: Tag) -> None:
        element = AstNode('jsxFlowElement', name=tag.name, attributes=tag.attributes)
        self._target().append(element)
        if not tag.self_closing:
            self.stack.append(element)

    def close(self, name: str) -> None:
        if not self.stack:
            raise MdxSyntaxError(f"Unexpected closing tag </{name}>")
        if self.stack[-1].name != name:
            raise MdxSyntaxError(f"Expected closing tag </{self.stack[-1].name}> before </{name}>")
        self.stack.pop()

    def add(self, node: AstNode) -> None:
        if node.type != 'paragraph':
            self._target().append(node)
            return
        for tag in self._leading_opens(node):
            self.open(tag)
        closes = self._trailing_closes(node)
        if node.children:
            self._target().append(_promote(node))
        for name in closes:
            self.close(name)

    def _leading_opens(self, paragraph: AstNode) -> list[Tag]:
        """Pop unmatched component open tags that start a paragraph."""
        opens = []
        while paragraph.children:
            tag = _whole_tag(paragraph.children[0])
            if not tag or tag.closing or tag.self_closing or not is_flow_name(tag.name):
                break
            paragraph.children.pop(0)
            _trim_text(paragraph.children, 0)
            opens.append(tag)
        return opens

    def _trailing_closes(self, paragraph: AstNode) -> list[str]:
        """Pop unmatched closing tags of open flow elements that end a paragraph."""
        closes = []
        while paragraph.children:
            tag = _whole_tag(paragraph.children[-1])
            if not tag or not tag.closing or not self._is_open(tag.name):
                break
            paragraph.children.pop()
            _trim_text(paragraph.children, -1)
            closes.insert(0, tag.name)
        return closes

    def feed_html(self, content: str) -> None:
        """Split a raw HTML block into tag events and markdown runs."""
        start = len(content) - len(content.lstrip())
        if match_tag(content, start) is None:
            self._target().append(AstNode('html', value=content.rstrip('\n')))
            return

        pos = 0
        while True:
            while pos < len(content) and content[pos].isspace():
                pos += 1
            if pos >= len(content):
                break
            tag = match_tag(content, pos)
            if tag is not None:
                if tag.closing:
                    self.close(tag.name)
                else:
                    self.open(tag)
                pos = tag.end
                continue
            end = self._run_end(content, pos)
            for node in _parse_blocks(textwrap.dedent(content[pos:end]).strip('\n'), self.env):
                self.add(node)
            pos = end

    def _run_end(self, content: str, pos: int) -> int:
        """End of a markdown run: the first closing tag of an open element, else the block end."""
        if not self.stack:
            return len(content)
        names = '|'.join(re.escape(el.name) for el in self.stack)
        m = re.compile(rf'</(?:{names})\s*>').search(content, pos)
        return m.start() if m else len(content)

    def finish(self) -> list[AstNode]:
        if self.stack:
            raise MdxSyntaxError(f"Unclosed <{self.stack[-1].name}> element")
        return self.root


def _trim_text(nodes: list[AstNode], index: int) -> None:
    """Strip whitespace from the text node at `index` (the edge next to a removed tag)."""
    if not nodes or nodes[index].type != 'text':
        return
    node = nodes[index]
    node.value = (node.value or '').lstrip() if index == 0 else (node.value or '').rstrip()
    if not node.value:
        nodes.pop(index)
