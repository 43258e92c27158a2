import logging
from pathlib import Path

from ormxgen.core.errors import SourceParseError
from ormxgen.core.imports import ensure_import
from ormxgen.core.parser import SourceFile
from ormxgen.core.ports.writer import SourceWriter
from ormxgen.models import Declaration, GeneratedBlock

logger = logging.getLogger(__name__)

SIDECAR_HEADER = "// Code generated by ormxgen. DO NOT EDIT."


def splice_block(source: bytes, offset: int, block: str) -> bytes:
    """Insert ``block`` at byte ``offset``, keeping everything after it."""
    if not 0 <= offset <= len(source):
        raise ValueError(f"offset {offset} outside source of {len(source)} bytes")
    return source[:offset] + block.encode("utf-8") + source[offset:]


def _decode(source: bytes, path: str) -> str:
    try:
        return source.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SourceParseError(path, f"source is not valid UTF-8: {exc}") from exc


def spliced_source(
    source_file: SourceFile, declaration: Declaration, block: GeneratedBlock, import_path: str
) -> bytes:
    spliced = splice_block(source_file.source, declaration.end_byte, block.text)
    return ensure_import(_decode(spliced, source_file.path), import_path).encode("utf-8")


def write_spliced(
    source_file: SourceFile,
    declaration: Declaration,
    block: GeneratedBlock,
    import_path: str,
    writer: SourceWriter,
) -> Path:
    path = Path(source_file.path)
    writer.write(path, spliced_source(source_file, declaration, block, import_path))
    logger.info("Generated code for %s inserted into %s", block.model_name, path)
    return path


def sidecar_path(path: str | Path, suffix: str = "_ormx.go") -> Path:
    source_path = Path(path)
    return source_path.with_name(f"{source_path.stem}{suffix}")


def sidecar_source(source_file: SourceFile, block: GeneratedBlock, import_path: str) -> bytes:
    if not source_file.package_name:
        raise SourceParseError(source_file.path, "no package clause, cannot write a separate file")
    text = "\n".join(
        [
            SIDECAR_HEADER,
            "",
            f"package {source_file.package_name}",
            "",
            "import (",
            f'\t"{import_path}"',
            ")",
            "",
            block.text.lstrip("\n"),
            "",
        ]
    )
    return text.encode("utf-8")


def write_sidecar(
    source_file: SourceFile,
    block: GeneratedBlock,
    import_path: str,
    writer: SourceWriter,
    suffix: str = "_ormx.go",
) -> Path:
    path = sidecar_path(source_file.path, suffix)
    writer.write(path, sidecar_source(source_file, block, import_path))
    logger.info("Generated code for %s written to %s", block.model_name, path)
    return path
