import logging
from collections.abc import Iterator
from pathlib import Path

from ormxgen.config import GeneratorConfig, OutputMode
from ormxgen.core.annotations import exclusion_reason, find_annotated, is_candidate
from ormxgen.core.errors import GenerationError, SourceReadError
from ormxgen.core.metadata import extract_metadata
from ormxgen.core.parser import SourceFile, parse_source, require_valid
from ormxgen.core.ports.writer import SourceWriter
from ormxgen.core.splice import write_sidecar, write_spliced
from ormxgen.core.synthesize import synthesize
from ormxgen.models import Declaration, FileResult, GeneratedBlock, ModelMetadata, ResultStatus, SkipReason
from ormxgen.writers import FileSystemSourceWriter

logger = logging.getLogger(__name__)

# Method whose presence marks a model as already generated.
GENERATED_SENTINEL_METHOD = "GetMetaData"


def iter_source_files(root: str | Path, suffix: str = ".go") -> Iterator[Path]:
    """Yield ``root`` itself if it is a source file, else every source file below it in sorted order."""
    root_path = Path(root)
    if root_path.is_file():
        if root_path.name.endswith(suffix):
            yield root_path
        return
    for path in sorted(root_path.rglob(f"*{suffix}")):
        if path.is_file():
            yield path


def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise SourceReadError(path, f"read error: {exc}") from exc


def _skipped(path: Path, reason: SkipReason, detail: str | None = None) -> FileResult:
    logger.debug("Skipping %s: %s", path, detail or reason.value)
    return FileResult(path=str(path), status=ResultStatus.SKIPPED, reason=reason, detail=detail)


def _pending_models(source_file: SourceFile) -> tuple[bool, list[tuple[Declaration, str]]]:
    """Return whether any annotation exists and the annotated models still lacking generated code."""
    annotated = find_annotated(source_file)
    pending = [
        (declaration, annotation.table)
        for declaration, annotation in annotated
        if not source_file.has_method(declaration.name, GENERATED_SENTINEL_METHOD)
    ]
    return bool(annotated), pending


def _process(path: Path, config: GeneratorConfig, writer: SourceWriter) -> FileResult:
    source = _read(path)
    if not is_candidate(source):
        return _skipped(path, SkipReason.NO_MARKER)
    reason = exclusion_reason(path, source)
    if reason:
        return _skipped(path, SkipReason.EXCLUDED, reason)

    source_file = require_valid(parse_source(source, path))
    has_annotations, pending = _pending_models(source_file)
    if not has_annotations:
        return _skipped(path, SkipReason.NO_ANNOTATION)
    if not pending:
        return _skipped(path, SkipReason.ALREADY_GENERATED)

    if config.mode == OutputMode.SIDECAR:
        # the separate file is owned by the generator, so it always holds every model
        blocks = [_block(declaration, table, config, path) for declaration, table in pending]
        combined = GeneratedBlock(
            model_name=", ".join(b.model_name for b in blocks),
            text="\n".join(b.text for b in blocks),
        )
        output = write_sidecar(source_file, combined, config.import_path, writer, config.sidecar_suffix)
        return FileResult(
            path=str(path), status=ResultStatus.GENERATED, model_name=combined.model_name, output_path=str(output)
        )

    # in place, only the first pending model is handled per run
    declaration, table = pending[0]
    block = _block(declaration, table, config, path)
    output = write_spliced(source_file, declaration, block, config.import_path, writer)
    return FileResult(path=str(path), status=ResultStatus.GENERATED, model_name=block.model_name, output_path=str(output))


def _block(declaration: Declaration, table: str, config: GeneratorConfig, path: Path) -> GeneratedBlock:
    meta = extract_metadata(declaration, table, config.tag_key, str(path))
    return synthesize(meta, config.package_qualifier, config.transient_field)


def process_file(
    path: str | Path,
    config: GeneratorConfig | None = None,
    writer: SourceWriter | None = None,
) -> FileResult:
    """Run the read-parse-synthesize-write cycle for one file.

    Failures are logged and returned as ``failed`` results rather than raised,
    so one bad file never stops a directory walk.
    """
    config = config or GeneratorConfig()
    writer = writer or FileSystemSourceWriter()
    file_path = Path(path)
    try:
        return _process(file_path, config, writer)
    except GenerationError as exc:
        logger.error("%s", exc)
        return FileResult(path=str(file_path), status=ResultStatus.FAILED, error=exc.message)


def generate_models(
    root: str | Path,
    config: GeneratorConfig | None = None,
    writer: SourceWriter | None = None,
) -> list[FileResult]:
    config = config or GeneratorConfig()
    writer = writer or FileSystemSourceWriter()
    return [process_file(path, config, writer) for path in iter_source_files(root, config.source_suffix)]


def inspect_file(path: str | Path, config: GeneratorConfig | None = None) -> list[ModelMetadata]:
    """Extract metadata for every annotated model in a file without writing anything.

    Raises ``GenerationError`` for unreadable, unparseable or unsupported input.
    """
    config = config or GeneratorConfig()
    file_path = Path(path)
    source = _read(file_path)
    if not is_candidate(source) or exclusion_reason(file_path, source):
        return []
    source_file = require_valid(parse_source(source, file_path))
    return [
        extract_metadata(declaration, annotation.table, config.tag_key, str(file_path))
        for declaration, annotation in find_annotated(source_file)
    ]
