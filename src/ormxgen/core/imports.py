import logging
import re

logger = logging.getLogger(__name__)


def _import_pattern(import_path: str, aliased: bool = False) -> re.Pattern[str]:
    quoted = re.escape(f'"{import_path}"')
    name = r"[\w.]+[ \t]+" if aliased else ""
    return re.compile(
        rf"^import\s*\((?:[^)]*[\n;])?[ \t]*{name}{quoted}"  # grouped form
        rf"|^import[ \t]+{name}{quoted}",  # single-line form
        re.MULTILINE,
    )


def has_import(text: str, import_path: str) -> bool:
    """Whether ``import_path`` is imported under its own package name."""
    return _import_pattern(import_path).search(text) is not None


def ensure_import(text: str, import_path: str) -> str:
    """Return ``text`` with exactly one unaliased import of ``import_path``.

    The entry goes first in an existing import group; a single-line import is
    turned into a group; without imports a group is added after the package
    clause. When none of those anchors exists the text is returned unchanged.
    """
    if has_import(text, import_path):
        return text
    if _import_pattern(import_path, aliased=True).search(text):
        # generated code refers to the package by its own name
        logger.warning("%s is only imported under an alias, adding an unaliased import", import_path)

    entry = f'\t"{import_path}"'
    lines = text.split("\n")
    for i, line in enumerate(lines):
        if line.startswith("import ("):
            rest = line[len("import (") :].strip()
            if rest.endswith(")"):
                # whole group on one line: import ("fmt")
                inner = rest[:-1].strip()
                lines[i : i + 1] = ["import (", entry, *([f"\t{inner}"] if inner else []), ")"]
            else:
                lines.insert(i + 1, entry)
            return "\n".join(lines)
        if line.startswith("import ") and '"' in line:
            existing = line[len("import ") :].strip()
            lines[i : i + 1] = ["import (", f"\t{existing}", entry, ")"]
            return "\n".join(lines)

    for i, line in enumerate(lines):
        if line.startswith("package "):
            lines[i + 1 : i + 1] = ["", "import (", entry, ")"]
            return "\n".join(lines)

    logger.warning("No import anchor found, %s not imported", import_path)
    return text
