"""Markdown + YAML frontmatter I/O for persistent data files."""

import dataclasses
import logging
import os
import re
import tempfile
from dataclasses import asdict
from pathlib import Path
from typing import TypeVar

import yaml

DATA_DIR = Path.home() / ".nudge-bot"

T = TypeVar("T")
log = logging.getLogger(__name__)

_STR_TYPES = (str, "str", str | None, "str | None")


def _slugify(text: str, max_len: int = 50) -> str:
    """Convert text to a filesystem-safe slug."""
    slug = text.lower()
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    slug = slug.strip("-")
    if len(slug) > max_len:
        slug = slug[:max_len].rstrip("-")
    return slug or "item"


def _serialize_md(item: T) -> str:
    """Build YAML frontmatter + markdown body from a dataclass with a `message` field.

    Fields equal to their dataclass default are omitted.
    """
    data = asdict(item)  # type: ignore[call-overload]
    message = data.pop("message")
    defaults = {
        f.name: f.default
        for f in dataclasses.fields(item)  # type: ignore[arg-type]
        if f.default is not dataclasses.MISSING and f.name != "message"
    }

    lines = ["---"]
    for key, value in data.items():
        if key in defaults and value == defaults[key]:
            continue
        if value is None:
            lines.append(f"{key}: null")
        elif isinstance(value, bool):
            lines.append(f"{key}: {str(value).lower()}")
        elif isinstance(value, str):
            # Quoted so YAML never reads "09:30" as a base-60 integer
            escaped = value.replace("\\", "\\\\").replace('"', '\\"')
            lines.append(f'{key}: "{escaped}"')
        else:
            lines.append(f"{key}: {value}")
    lines.append("---")
    lines.append(message)
    return "\n".join(lines) + "\n"


def _parse_md(text: str, cls: type[T]) -> T:
    """Parse a single markdown file with YAML frontmatter into a dataclass."""
    parts = text.split("---", 2)
    if len(parts) < 3:
        raise ValueError("Missing YAML frontmatter delimiters")
    data = yaml.safe_load(parts[1])
    if not isinstance(data, dict):
        raise ValueError("YAML frontmatter is not a mapping")

    fields = {f.name: f for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
    filtered: dict[str, object] = {}
    for key, value in data.items():
        if key not in fields:
            continue
        if fields[key].type in _STR_TYPES and value is not None:
            filtered[key] = str(value)
        else:
            filtered[key] = value
    filtered["message"] = parts[2].strip()
    return cls(**filtered)


def _read_id(filepath: Path) -> str | None:
    parts = filepath.read_text().split("---", 2)
    if len(parts) < 3:
        return None
    try:
        data = yaml.safe_load(parts[1])
    except yaml.YAMLError:
        return None
    if isinstance(data, dict) and data.get("id") is not None:
        return str(data["id"])
    return None


def read_md_dir(dir_path: Path, cls: type[T]) -> list[T]:
    """Read all .md files in a directory into dataclass instances. Skips corrupt files."""
    if not dir_path.is_dir():
        return []
    result: list[T] = []
    for filepath in sorted(dir_path.glob("*.md")):
        try:
            result.append(_parse_md(filepath.read_text(), cls))
        except (ValueError, yaml.YAMLError, TypeError, KeyError):
            log.warning("Skipping corrupt file: %s", filepath)
    return result


def write_md(dir_path: Path, item: T) -> Path:
    """Write one item as a .md file named after its message slug. Atomic write.

    An existing file holding the same id is overwritten in place.
    """
    dir_path.mkdir(parents=True, exist_ok=True)
    item_id = str(item.id)  # type: ignore[attr-defined]
    target = _find_by_id(dir_path, item_id)
    if target is None:
        slug = _slugify(item.message)  # type: ignore[attr-defined]
        target = dir_path / f"{slug}.md"
        counter = 2
        while target.exists():
            target = dir_path / f"{slug}-{counter}.md"
            counter += 1

    fd, tmp = tempfile.mkstemp(dir=dir_path, suffix=".tmp")
    try:
        os.write(fd, _serialize_md(item).encode())
    finally:
        os.close(fd)
    os.replace(tmp, target)
    return target


def _find_by_id(dir_path: Path, item_id: str) -> Path | None:
    if not dir_path.is_dir():
        return None
    for filepath in dir_path.glob("*.md"):
        if _read_id(filepath) == item_id:
            return filepath
    return None
