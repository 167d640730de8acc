"""Host-side discovery of .md/.mdx files"""

from pathlib import Path


MDX_EXTENSIONS = {'.md', '.mdx'}


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single matching file."""
    if path.is_file():
        return [path] if path.suffix.lower() in MDX_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() in MDX_EXTENSIONS)
