import logging
import re
from collections import Counter

from ormxgen.core.errors import ExtractionError
from ormxgen.models import ColumnInfo, Declaration, Field, ModelMetadata

logger = logging.getLogger(__name__)

DEFAULT_TAG_KEY = "db"

# SetLastID and GetPrimaryKeyVal exchange the key as int64.
INTEGER_TYPES = frozenset(
    {"int", "int8", "int16", "int32", "int64", "uint", "uint8", "uint16", "uint32", "uint64", "uintptr", "byte", "rune"}
)

# Same shape reflect.StructTag accepts: key:"value" pairs separated by spaces.
_TAG_PAIR = re.compile(r'([^\s:"]+):"((?:[^"\\]|\\.)*)"')
_ESCAPE = re.compile(r"\\(.)")


def parse_struct_tag(tag: str | None, path: str = "<memory>") -> dict[str, str]:
    if tag is None or not tag.strip():
        return {}
    pairs: dict[str, str] = {}
    for match in _TAG_PAIR.finditer(tag):
        key, raw_value = match.groups()
        pairs.setdefault(key, _ESCAPE.sub(r"\1", raw_value))
    if not pairs:
        raise ExtractionError(path, f"malformed struct tag `{tag}`")
    return pairs


def storage_key(field: Field, tag_key: str = DEFAULT_TAG_KEY, path: str = "<memory>") -> str:
    """Column name for a field: its tag value, or the lower-cased field name."""
    value = parse_struct_tag(field.tag, path).get(tag_key, "")
    return value or field.name.lower()


def receiver_name(model_name: str) -> str:
    first = model_name[:1].lower()
    return first if first.isalpha() else "m"


def extract_metadata(
    declaration: Declaration,
    table: str,
    tag_key: str = DEFAULT_TAG_KEY,
    path: str = "<memory>",
) -> ModelMetadata:
    if declaration.is_generic:
        raise ExtractionError(path, f"{declaration.name}: generic structs are not supported")
    if not declaration.fields:
        raise ExtractionError(path, f"{declaration.name}: struct has no named fields")

    columns = [
        ColumnInfo(key=storage_key(f, tag_key, path), type_name=f.type_name, field_name=f.name)
        for f in declaration.fields
    ]

    duplicates = sorted(key for key, count in Counter(c.key for c in columns).items() if count > 1)
    if duplicates:
        logger.warning("%s: %s has duplicate storage keys: %s", path, declaration.name, ", ".join(duplicates))

    primary = columns[0]
    if primary.type_name not in INTEGER_TYPES:
        raise ExtractionError(
            path,
            f"{declaration.name}: primary key {primary.field_name} has type {primary.type_name}, "
            "expected an integer type",
        )
    return ModelMetadata(
        model_name=declaration.name,
        receiver=receiver_name(declaration.name),
        table=table,
        primary_key=primary.key,
        primary_field=primary.field_name,
        primary_type=primary.type_name,
        columns=columns,
    )
