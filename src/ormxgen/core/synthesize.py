import json

from ormxgen.models import GeneratedBlock, ModelMetadata

BANNER_PREFIX = "// --- Generated by ormxgen for"


def _go_string(value: str) -> str:
    # JSON string escapes are a subset of Go's interpreted string literal escapes
    return json.dumps(value)


def lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]


def columns_var_name(model_name: str) -> str:
    return f"{lower_first(model_name)}Columns"


def _meta(meta: ModelMetadata, pkg: str) -> list[str]:
    r, model = meta.receiver, meta.model_name
    return [
        "// GetMetaData returns the model's table name and primary key column.",
        f"func ({r} *{model}) GetMetaData() {pkg}.ModelMeta {{",
        f"\treturn {pkg}.ModelMeta{{",
        f"\t\tPrimaryKey: {_go_string(meta.primary_key)},",
        f"\t\tTable:      {_go_string(meta.table)},",
        "\t}",
        "}",
    ]


def _columns(meta: ModelMetadata) -> list[str]:
    var = columns_var_name(meta.model_name)
    lines = [
        f"// {var} lists the table columns, computed once at generation time.",
        "// The order must match both the struct fields and the table columns.",
        "// Regenerate or edit this list by hand whenever the table schema changes.",
        f"var {var} = []string{{",
    ]
    lines.extend(f"\t{_go_string(column.key)}," for column in meta.columns)
    lines.append("}")
    lines.append("")
    lines.extend(
        [
            "// GetColumns returns the table column names in struct field order.",
            f"func ({meta.receiver} *{meta.model_name}) GetColumns() []string {{",
            f"\treturn {var}",
            "}",
        ]
    )
    return lines


def _get_field(meta: ModelMetadata, pkg: str) -> list[str]:
    r = meta.receiver
    lines = [
        f"// GetField returns the {pkg}.OpsFields for a column: its key, type, value and a pointer to the field.",
        "// Unknown columns return nil.",
        f"func ({r} *{meta.model_name}) GetField(field string) *{pkg}.OpsFields {{",
        "\tswitch field {",
    ]
    for column in meta.columns:
        key = _go_string(column.key)
        lines.append(f"\tcase {key}:")
        lines.append(
            f"\t\treturn &{pkg}.OpsFields{{Key: {key}, Typ: {_go_string(column.type_name)}, "
            f"Value: {r}.{column.field_name}, Ptr: &{r}.{column.field_name}}}"
        )
    lines.extend(["\tdefault:", "\t\treturn nil", "\t}", "}"])
    return lines


def _lifecycle(meta: ModelMetadata, transient_field: str) -> list[str]:
    r, model, pk = meta.receiver, meta.model_name, meta.primary_field
    assigned, returned = "id", f"{r}.{pk}"
    if meta.primary_type != "int64":
        assigned, returned = f"{meta.primary_type}(id)", f"int64({r}.{pk})"
    return [
        "// IsNew reports whether the object has not been stored yet: either the",
        f"// {transient_field} flag is set or the primary key still holds its zero value.",
        "// A row whose stored primary key is 0 is therefore reported as new too.",
        f"func ({r} *{model}) IsNew() bool {{",
        f"\tif {r}.{transient_field} {{",
        "\t\treturn true",
        "\t}",
        f"\treturn {r}.{pk} == 0",
        "}",
        "",
        "// SetLastID stores the identifier assigned by the database after an insert.",
        f"func ({r} *{model}) SetLastID(id int64) {{",
        f"\t{r}.{pk} = {assigned}",
        "}",
        "",
        "// GetPrimaryKeyVal returns the primary key value for callers that only know the model interface.",
        f"func ({r} *{model}) GetPrimaryKeyVal() int64 {{",
        f"\treturn {returned}",
        "}",
    ]


def synthesize(meta: ModelMetadata, package_qualifier: str = "ormx", transient_field: str = "setNew") -> GeneratedBlock:
    """Assemble the Go methods and column list exposing ``meta``.

    The text starts with a blank line and a banner and ends right after the last
    closing brace, so it can be spliced directly after a type declaration.
    """
    sections = [
        _meta(meta, package_qualifier),
        _columns(meta),
        _get_field(meta, package_qualifier),
        _lifecycle(meta, transient_field),
    ]
    lines = ["", "", f"{BANNER_PREFIX} {meta.model_name} ---"]
    for section in sections:
        lines.append("")
        lines.extend(section)
    return GeneratedBlock(model_name=meta.model_name, text="\n".join(lines))
