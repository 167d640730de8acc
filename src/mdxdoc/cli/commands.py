"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError

from mdxdoc.config import Settings, load_config
from mdxdoc.core.frontmatter import split_frontmatter
from mdxdoc.core.imports import extract_imports, generate_imports
from mdxdoc.core.pipeline import ParsedMdx, parse_mdx_to_document, serialize_document_to_mdx
from mdxdoc.core.utils.diff import changed_lines, unified_diff
from mdxdoc.util.fs import discover_files


logger = logging.getLogger(__name__)


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot read {path}", e)


def _emit(text: str, out: Optional[Path]) -> None:
    """Write `text` to `out`, or stdout when no output file was given."""
    if out is None:
        typer.echo(text, nl=False)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    typer.echo(f"Wrote {out}")


def _render(parsed: ParsedMdx, settings: Settings) -> str:
    return serialize_document_to_mdx(
        parsed.yaml, parsed.doc, parsed.unknown_imports,
        import_root=settings.component_import_root,
        extension=settings.component_extension,
    )


def parse_cmd(
    path: Annotated[Path, typer.Argument(help="MDX file to parse")],
    out: Annotated[Optional[Path], typer.Option("--out", help="Write JSON here instead of stdout")] = None,
    ):
    """Parse an MDX file and print its frontmatter, document tree and preserved imports as JSON."""
    settings = _settings()
    try:
        parsed = parse_mdx_to_document(_read(path))
    except ValueError as e:
        _fail(f"Cannot parse {path}", e)
    indent = settings.json_indent or None
    _emit(parsed.model_dump_json(indent=indent, by_alias=True) + "\n", out)


def render_cmd(
    path: Annotated[Path, typer.Argument(help="JSON file produced by 'mdxdoc parse'")],
    out: Annotated[Optional[Path], typer.Option("--out", help="Write MDX here instead of stdout")] = None,
    import_root: Annotated[Optional[str], typer.Option("--import-root", help="Directory prefix for component imports")] = None,
    ):
    """Serialize a parsed-document JSON file back to MDX."""
    settings = _settings(overrides={"component_import_root": import_root})
    try:
        parsed = ParsedMdx.model_validate_json(_read(path))
    except ValidationError as e:
        _fail(f"Invalid document JSON in {path}", e)
    _emit(_render(parsed, settings), out)


def roundtrip_cmd(
    path: Annotated[Path, typer.Argument(help="File or directory of .md/.mdx files")],
    check: Annotated[bool, typer.Option("--check", help="Print diffs and exit 1 if any file would change")] = False,
    write: Annotated[bool, typer.Option("--write", help="Rewrite files in normalized form")] = False,
    ):
    """Parse and re-serialize each file, reporting which ones are not already normalized."""
    settings = _settings()
    if not path.exists():
        _fail(f"No such file or directory: {path}")
    files = discover_files(path)
    if not files:
        typer.echo(f"No .md/.mdx files found under {path}.")
        raise typer.Exit(1)

    changed = 0
    for file in files:
        raw = _read(file)
        try:
            normalized = _render(parse_mdx_to_document(raw), settings)
        except ValueError as e:
            _fail(f"Cannot parse {file}", e)
        if normalized == raw:
            logger.debug("Unchanged: %s", file)
            continue
        changed += 1
        lines = changed_lines(raw, normalized)
        if check:
            typer.echo("".join(unified_diff(raw, normalized, str(file), f"{file} (normalized)")))
        if write:
            file.write_text(normalized, encoding="utf-8")
            typer.echo(f"  rewrote: {file} ({lines} line(s))")
        elif not check:
            typer.echo(f"  changed: {file} ({lines} line(s))")

    typer.echo(f"Round-trip complete - {len(files)} file(s), {changed} changed")
    if check and changed:
        raise typer.Exit(1)


def imports_cmd(
    path: Annotated[Path, typer.Argument(help="MDX file to inspect")],
    ):
    """Print the component import lines the file body requires."""
    settings = _settings()
    _, body = split_frontmatter(_read(path))
    body, _ = extract_imports(body)
    for line in generate_imports(body, settings.component_import_root, settings.component_extension):
        typer.echo(line)
