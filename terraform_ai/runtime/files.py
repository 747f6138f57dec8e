"""Persistence helpers for generated templates."""

import re
import secrets
from pathlib import Path
from typing import Optional, Union

from terraform_ai.errors import ArtifactIOError

_LEADING_BLANK_LINES = re.compile(r"\A(?:[ \t]*\n)+")
_BLANK_LINE_RUNS = re.compile(r"\n(?:[ \t]*\n){2,}")


def remove_blank_lines(text: str) -> str:
    """
    Drop leading blank lines and collapse runs of blank lines.

    A run of two or more blank lines after the first non-blank line becomes
    a single blank line, so "a\\n\\n\\nb\\n\\n\\n" turns into "a\\n\\nb\\n\\n".
    """
    text = _LEADING_BLANK_LINES.sub("", text)
    return _BLANK_LINE_RUNS.sub("\n\n", text)


def ends_with_tf(name: str) -> bool:
    return name.endswith(".tf") and name != ".tf"


def random_name() -> str:
    """Return a fresh name of the form terraform-<random>.tf."""
    return f"terraform-{secrets.token_urlsafe(5)}.tf"


def get_name(name: Optional[str]) -> str:
    """
    Turn a model-suggested file name into a safe template file name.

    Blank lines, surrounding whitespace, quotes and directory parts are
    removed. Anything that does not end in ".tf" is replaced by a random
    name.
    """
    cleaned = remove_blank_lines(name or "").strip().strip("`'\"")
    cleaned = Path(cleaned).name if cleaned else ""
    if ends_with_tf(cleaned):
        return cleaned
    return random_name()


def store_file(path: Union[str, Path], contents: str) -> Path:
    """
    Write a template with blank lines removed, readable by the owner only.

    Args:
        path: Destination file
        contents: Template text

    Returns:
        The path written

    Raises:
        ArtifactIOError: if the file cannot be written
    """
    file_path = Path(path)
    try:
        file_path.write_text(remove_blank_lines(contents), encoding="utf-8")
        file_path.chmod(0o600)
    except OSError as e:
        raise ArtifactIOError(f"error writing file {file_path}: {e}") from e
    return file_path
