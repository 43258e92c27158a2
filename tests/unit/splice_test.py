"""Unit tests for splicing generated code and the source writers."""

import os
import stat
from pathlib import Path

import pytest

from ormxgen.core.errors import SourceParseError, SourceWriteError
from ormxgen.core.metadata import extract_metadata
from ormxgen.core.parser import parse_source
from ormxgen.core.splice import (
    SIDECAR_HEADER,
    sidecar_path,
    sidecar_source,
    splice_block,
    spliced_source,
    write_sidecar,
    write_spliced,
)
from ormxgen.core.synthesize import synthesize
from ormxgen.writers import FileSystemSourceWriter, InMemorySourceWriter


def _order_block(source: bytes):
    source_file = parse_source(source, "models/order.go")
    declaration = source_file.declarations[0]
    block = synthesize(extract_metadata(declaration, "orders"))
    return source_file, declaration, block


class TestSpliceBlock:
    def test_inserts_and_keeps_tail(self) -> None:
        assert splice_block(b"abcdef", 3, "XY") == b"abcXYdef"

    def test_offset_at_end(self) -> None:
        assert splice_block(b"abc", 3, "!") == b"abc!"

    @pytest.mark.parametrize("offset", [-1, 4])
    def test_offset_out_of_range(self, offset: int) -> None:
        with pytest.raises(ValueError):
            splice_block(b"abc", offset, "x")

    def test_multibyte_source_uses_byte_offsets(self) -> None:
        source = "é}tail".encode()
        assert splice_block(source, 3, "+") == "é}+tail".encode()


class TestSplicedSource:
    def test_block_follows_struct_and_tail_survives(self, order_source: str) -> None:
        source_file, declaration, block = _order_block(order_source.encode())
        text = spliced_source(source_file, declaration, block, "ormx").decode()

        assert text.index("type Order struct") < text.index("// --- Generated by ormxgen for Order ---")
        assert text.index("GetPrimaryKeyVal") < text.index("func helper() string")
        assert "    CreatedAt time.Time\n}\n\n// --- Generated by ormxgen for Order ---\n" in text
        assert text.endswith('    return "ok"\n}\n')

    def test_import_is_patched(self, order_source: str) -> None:
        source_file, declaration, block = _order_block(order_source.encode())
        text = spliced_source(source_file, declaration, block, "ormx").decode()
        assert 'import (\n\t"time"\n\t"ormx"\n)' in text

    def test_spliced_output_parses(self, order_source: str) -> None:
        source_file, declaration, block = _order_block(order_source.encode())
        reparsed = parse_source(spliced_source(source_file, declaration, block, "ormx"))
        assert reparsed.has_error is False
        assert reparsed.has_method("Order", "GetMetaData")
        assert reparsed.has_method("Order", "GetPrimaryKeyVal")

    def test_write_spliced_uses_writer(self, order_source: str) -> None:
        source_file, declaration, block = _order_block(order_source.encode())
        writer = InMemorySourceWriter()
        path = write_spliced(source_file, declaration, block, "ormx", writer)
        assert path == Path("models/order.go")
        assert "func (o *Order) GetColumns() []string" in writer.text(path)


class TestSidecar:
    def test_sidecar_path(self) -> None:
        assert sidecar_path("models/order.go") == Path("models/order_ormx.go")
        assert sidecar_path("models/order.go", "_gen.go") == Path("models/order_gen.go")

    def test_sidecar_source_layout(self, order_source: str) -> None:
        source_file, _, block = _order_block(order_source.encode())
        text = sidecar_source(source_file, block, "ormx").decode()
        assert text.startswith(f'{SIDECAR_HEADER}\n\npackage models\n\nimport (\n\t"ormx"\n)\n\n// --- Generated')
        assert text.endswith("}\n")
        assert parse_source(text.encode()).has_error is False

    def test_sidecar_requires_package(self, order_source: str) -> None:
        source_file, _, block = _order_block(order_source.encode())
        source_file.package_name = None
        with pytest.raises(SourceParseError):
            sidecar_source(source_file, block, "ormx")

    def test_write_sidecar(self, order_source: str) -> None:
        source_file, _, block = _order_block(order_source.encode())
        writer = InMemorySourceWriter()
        path = write_sidecar(source_file, block, "ormx", writer)
        assert path == Path("models/order_ormx.go")
        assert list(writer.files) == [path]


class TestFileSystemSourceWriter:
    def test_replaces_content_and_keeps_mode(self, tmp_path: Path) -> None:
        target = tmp_path / "order.go"
        target.write_bytes(b"old")
        target.chmod(0o600)

        FileSystemSourceWriter().write(target, b"new")

        assert target.read_bytes() == b"new"
        assert stat.S_IMODE(target.stat().st_mode) == 0o600
        assert sorted(p.name for p in tmp_path.iterdir()) == ["order.go"]

    def test_creates_new_file(self, tmp_path: Path) -> None:
        target = tmp_path / "order_ormx.go"
        FileSystemSourceWriter().write(target, b"package m\n")
        assert target.read_bytes() == b"package m\n"

    def test_missing_directory_raises_write_error(self, tmp_path: Path) -> None:
        with pytest.raises(SourceWriteError):
            FileSystemSourceWriter().write(tmp_path / "missing" / "order.go", b"x")

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
    def test_read_only_directory_raises_write_error(self, tmp_path: Path) -> None:
        target = tmp_path / "order.go"
        target.write_bytes(b"old")
        tmp_path.chmod(0o500)
        try:
            with pytest.raises(SourceWriteError):
                FileSystemSourceWriter().write(target, b"new")
        finally:
            tmp_path.chmod(0o700)
        assert target.read_bytes() == b"old"
