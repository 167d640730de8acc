"""YAML frontmatter splitting and reassembly around an MDX body"""

import re
from typing import Any, NamedTuple

import yaml


FRONTMATTER_RE = re.compile(r'^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|$)', re.DOTALL)


class Split(NamedTuple):
    yaml: str
    body: str


def split_frontmatter(raw: str) -> Split:
    """Return (yaml, body); an absent or unclosed fence leaves everything in body."""
    m = FRONTMATTER_RE.match(raw)
    if not m:
        return Split(yaml="", body=raw)
    return Split(yaml=m.group(1) or "", body=raw[m.end():])


def assemble_mdx(yaml_text: str, body: str, imports: list[str]) -> str:
    """Inverse of split_frontmatter: fence, imports, blank line, body, final newline."""
    import_section = "\n".join(imports) + "\n" if imports else ""
    body = body.strip("\n")
    return f"---\n{yaml_text.strip()}\n---\n{import_section}\n{body}\n"


def load_frontmatter(yaml_text: str) -> dict[str, Any]:
    """Parse a frontmatter string into a dict (empty for blank input)."""
    try:
        data = yaml.safe_load(yaml_text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(data).__name__}")
    return data
