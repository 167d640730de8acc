"""Shared markdown-it syntax-tree utilities"""

from markdown_it.tree import SyntaxTreeNode


def heading_level(node: SyntaxTreeNode) -> int | None:
    """Return the heading level (1-6) for a heading node, else None."""
    if node.type == 'heading' and node.tag and node.tag[0] == 'h' and node.tag[1:].isdigit():
        return int(node.tag[1:])
    return None


def inline_children(node: SyntaxTreeNode) -> list[SyntaxTreeNode]:
    """Return the inline children of a paragraph-like node (empty if none)."""
    for child in node.children:
        if child.type == 'inline':
            return child.children
    return []


def footnote_label(meta: dict) -> str:
    """Footnote label from token meta; numbered labels for anonymous notes."""
    if meta.get('label'):
        return str(meta['label'])
    return str(meta.get('id', 0) + 1)
