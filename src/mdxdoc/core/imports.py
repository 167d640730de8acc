"""Component import inference and import-line extraction for MDX bodies"""

import logging
import re
from typing import Iterator, NamedTuple


logger = logging.getLogger(__name__)

DEFAULT_IMPORT_ROOT = "../../../components"
DEFAULT_EXTENSION = ".astro"

# Declaration order is the order imports are emitted in
COMPONENTS = ("LiteYouTube", "Figure", "Table", "TwitterCard")

FENCE_RE = re.compile(r'^(`{3,}|~{3,})')
IMPORT_START_RE = re.compile(r'^import\s')
IMPORT_END_RE = re.compile(r'''from\s+["'].*["'];?\s*$''')
SIDE_EFFECT_RE = re.compile(r'''^import\s+["']''')


class Extracted(NamedTuple):
    body:            str
    unknown_imports: list[str]


def _tag_re(name: str) -> re.Pattern:
    return re.compile(rf'<{name}[\s/>]')


def import_line(name: str, import_root: str = DEFAULT_IMPORT_ROOT, extension: str = DEFAULT_EXTENSION) -> str:
    return f'import {name} from "{import_root}/{name}{extension}";'


def _iter_lines(body: str) -> Iterator[tuple[str, bool]]:
    """Yield (line, is_code) where is_code marks fence lines and fenced content.

    Fences are recognised at any indentation, so code nested in list items counts.
    """
    fence = None
    for line in re.split(r'\r?\n', body):
        m = FENCE_RE.match(line.lstrip())
        if fence is None:
            if m:
                fence = m.group(1)
                yield line, True
            else:
                yield line, False
        else:
            if m and m.group(1)[0] == fence[0] and len(m.group(1)) >= len(fence) \
                    and not line.strip()[len(m.group(1)):].strip():
                fence = None
            yield line, True


def generate_imports(
    body: str,
    import_root: str = DEFAULT_IMPORT_ROOT,
    extension: str = DEFAULT_EXTENSION,
    ) -> list[str]:
    """Return import lines for each registered component used outside code fences."""
    text = "\n".join(line for line, is_code in _iter_lines(body) if not is_code)
    return [
        import_line(name, import_root, extension)
        for name in COMPONENTS if _tag_re(name).search(text)
    ]


def is_known_import(statement: str) -> bool:
    """True for default imports of a registered component (regenerated on save)."""
    return any(re.match(rf'\s*import\s+{name}\s+from\s', statement) for name in COMPONENTS)


def _is_complete(line: str) -> bool:
    return bool(IMPORT_END_RE.search(line) or SIDE_EFFECT_RE.match(line))


def extract_imports(body: str) -> Extracted:
    """Strip top-level import statements from `body`.

    Only lines at column 0 that start the body, follow a blank line or follow
    another import open a statement; imports inside code fences or running on
    from a paragraph are content. Multi-line imports are accumulated up to
    their `from "..."` line. Registered component imports are dropped;
    everything else is returned in source order.
    """
    clean: list[str] = []
    unknown: list[str] = []
    buffer: list[str] = []
    boundary = True

    def finish(statement: str) -> None:
        if is_known_import(statement):
            logger.debug("Dropped generated import: %s", statement)
        else:
            unknown.append(statement)

    for line, is_code in _iter_lines(body):
        if buffer:
            buffer.append(line)
            if IMPORT_END_RE.search(line):
                finish("\n".join(buffer))
                buffer = []
            continue
        if is_code or not boundary or not IMPORT_START_RE.match(line):
            clean.append(line)
            boundary = not is_code and not line.strip()
            continue
        if _is_complete(line):
            finish(line)
        else:
            buffer = [line]

    if buffer:
        # Unterminated statement: keep it rather than lose it
        unknown.append("\n".join(buffer))
    return Extracted(body="\n".join(clean), unknown_imports=unknown)
