import re
from pathlib import Path

from ormxgen.core.parser import SourceFile
from ormxgen.models import Annotation, Declaration

MARKER = "ormx:generateModel"

# Files holding ormx's own support types must never be rewritten.
_EXCLUDED_FILENAMES = frozenset({"prototype.go", "model_object.go"})
_RESERVED_TYPES = (
    re.compile(r"\btype\s+Prototype\s+struct\b"),
    re.compile(r"\btype\s+ModelObjet\s+struct\b"),
)


def is_candidate(content: bytes | str) -> bool:
    """Cheap containment check run before paying for a parse."""
    if isinstance(content, bytes):
        return MARKER.encode("utf-8") in content
    return MARKER in content


def exclusion_reason(path: str | Path, content: bytes | str) -> str | None:
    name = Path(path).name
    if name in _EXCLUDED_FILENAMES:
        return f"excluded filename {name}"
    text = content.decode("utf-8", errors="replace") if isinstance(content, bytes) else content
    for pattern in _RESERVED_TYPES:
        match = pattern.search(text)
        if match:
            return f"defines reserved type ({' '.join(match.group(0).split())})"
    return None


def parse_annotation(comment: str) -> Annotation | None:
    """Parse ``// ormx:generateModel table=users other=x`` into an Annotation.

    Every ``key=value`` token is kept; only ``table`` is consumed downstream.
    """
    if MARKER not in comment:
        return None
    params: dict[str, str] = {}
    for token in comment.strip().split():
        key, sep, value = token.partition("=")
        if sep and key and key not in params:
            params[key] = value
    return Annotation(marker=MARKER, params=params)


def find_annotation(declaration: Declaration) -> Annotation | None:
    for comment in declaration.doc_comments:
        annotation = parse_annotation(comment)
        if annotation is None:
            continue
        # first marker line wins, even when it carries no table
        return annotation if annotation.table else None
    return None


def find_annotated(source_file: SourceFile) -> list[tuple[Declaration, Annotation]]:
    pairs: list[tuple[Declaration, Annotation]] = []
    for declaration in source_file.declarations:
        annotation = find_annotation(declaration)
        if annotation is not None:
            pairs.append((declaration, annotation))
    return pairs
