from enum import StrEnum

from pydantic import BaseModel


class Field(BaseModel):
    name: str
    type_name: str
    tag: str | None = None


class Declaration(BaseModel):
    name: str
    fields: list[Field]
    doc_comments: list[str] = []
    end_byte: int
    is_generic: bool = False


class Annotation(BaseModel):
    marker: str
    params: dict[str, str] = {}

    @property
    def table(self) -> str:
        return self.params.get("table", "")


class ColumnInfo(BaseModel):
    key: str
    type_name: str
    field_name: str


class ModelMetadata(BaseModel):
    model_name: str
    receiver: str
    table: str
    primary_key: str
    primary_field: str
    primary_type: str = "int64"
    columns: list[ColumnInfo]

    @property
    def column_keys(self) -> list[str]:
        return [column.key for column in self.columns]


class GeneratedBlock(BaseModel):
    model_name: str
    text: str


class ResultStatus(StrEnum):
    GENERATED = "generated"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason(StrEnum):
    NO_MARKER = "no_marker"
    EXCLUDED = "excluded"
    NO_ANNOTATION = "no_annotation"
    ALREADY_GENERATED = "already_generated"


class FileResult(BaseModel):
    path: str
    status: ResultStatus
    reason: SkipReason | None = None
    model_name: str | None = None
    output_path: str | None = None
    detail: str | None = None
    error: str | None = None
