"""Unit tests for annotation scanning and the exclusion policy."""

import pytest

from ormxgen.core.annotations import (
    MARKER,
    exclusion_reason,
    find_annotated,
    find_annotation,
    is_candidate,
    parse_annotation,
)
from ormxgen.core.parser import parse_source
from ormxgen.models import Declaration, Field


def _declaration(*comments: str) -> Declaration:
    return Declaration(
        name="Order",
        fields=[Field(name="ID", type_name="int64")],
        doc_comments=list(comments),
        end_byte=10,
    )


class TestPrefilter:
    def test_marker_in_bytes(self) -> None:
        assert is_candidate(b"// ormx:generateModel table=x\n")

    def test_marker_in_text(self) -> None:
        assert is_candidate("// ormx:generateModel table=x\n")

    def test_no_marker(self) -> None:
        assert not is_candidate(b"package models\n")


class TestExclusion:
    @pytest.mark.parametrize("name", ["prototype.go", "model_object.go"])
    def test_denylisted_filenames(self, name: str) -> None:
        assert exclusion_reason(f"/src/ormx/{name}", b"package ormx\n") is not None

    @pytest.mark.parametrize(
        "content",
        [
            "package ormx\n\ntype Prototype struct {\n}\n",
            "package ormx\n\ntype  ModelObjet   struct {\n}\n",
        ],
    )
    def test_reserved_type_names(self, content: str) -> None:
        reason = exclusion_reason("/src/ormx/base.go", content)
        assert reason is not None
        assert "reserved type" in reason

    def test_similar_names_are_not_reserved(self) -> None:
        content = "package m\n\ntype PrototypeOrder struct {\n}\n"
        assert exclusion_reason("/src/models/order.go", content) is None

    def test_regular_file(self, order_source: str) -> None:
        assert exclusion_reason("/src/models/order.go", order_source.encode()) is None


class TestParseAnnotation:
    def test_parses_table(self) -> None:
        annotation = parse_annotation("// ormx:generateModel table=orders")
        assert annotation is not None
        assert annotation.marker == MARKER
        assert annotation.table == "orders"

    def test_keeps_unknown_keys(self) -> None:
        annotation = parse_annotation("// ormx:generateModel schema=public table=orders")
        assert annotation is not None
        assert annotation.params == {"schema": "public", "table": "orders"}
        assert annotation.table == "orders"

    def test_first_duplicate_key_wins(self) -> None:
        annotation = parse_annotation("// ormx:generateModel table=a table=b")
        assert annotation is not None
        assert annotation.table == "a"

    def test_comment_without_marker(self) -> None:
        assert parse_annotation("// table=orders") is None

    def test_marker_without_table(self) -> None:
        annotation = parse_annotation("// ormx:generateModel")
        assert annotation is not None
        assert annotation.table == ""


class TestFindAnnotation:
    def test_finds_marker_line(self) -> None:
        annotation = find_annotation(_declaration("// Order doc.", "// ormx:generateModel table=orders"))
        assert annotation is not None
        assert annotation.table == "orders"

    def test_missing_table_is_not_eligible(self) -> None:
        assert find_annotation(_declaration("// ormx:generateModel")) is None

    def test_empty_table_is_not_eligible(self) -> None:
        assert find_annotation(_declaration("// ormx:generateModel table=")) is None

    def test_first_marker_line_decides(self) -> None:
        declaration = _declaration("// ormx:generateModel", "// ormx:generateModel table=orders")
        assert find_annotation(declaration) is None

    def test_no_doc_comment(self) -> None:
        assert find_annotation(_declaration()) is None

    def test_find_annotated_keeps_source_order(self) -> None:
        source = (
            "package m\n\n"
            "type Plain struct {\n    ID int64\n}\n\n"
            "// ormx:generateModel table=users\n"
            "type User struct {\n    ID int64\n}\n\n"
            "// ormx:generateModel table=groups\n"
            "type Group struct {\n    ID int64\n}\n"
        )
        pairs = find_annotated(parse_source(source.encode()))
        assert [(d.name, a.table) for d, a in pairs] == [("User", "users"), ("Group", "groups")]
