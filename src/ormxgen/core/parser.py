from dataclasses import dataclass, field
from pathlib import Path
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from ormxgen.core.errors import SourceParseError
from ormxgen.models import Declaration, Field

GO_LANGUAGE = "go"


@dataclass(frozen=True)
class MethodRef:
    receiver_type: str
    name: str


@dataclass
class SourceFile:
    path: str
    source: bytes
    package_name: str | None = None
    declarations: list[Declaration] = field(default_factory=list)
    methods: list[MethodRef] = field(default_factory=list)
    has_error: bool = False

    def has_method(self, receiver_type: str, name: str) -> bool:
        return MethodRef(receiver_type, name) in self.methods


def _node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _type_name(node: Node, source: bytes) -> str:
    if node.type == "qualified_type":
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        if package is not None and name is not None:
            return f"{_node_text(package, source)}.{_node_text(name, source)}"
    # composite types (pointers, slices, maps...) keep their source spelling
    return " ".join(_node_text(node, source).split())


def _unquote_tag(literal: str) -> str:
    if literal.startswith("`"):
        return literal.strip("`")
    inner = literal[1:-1] if len(literal) >= 2 else ""
    return inner.replace('\\"', '"').replace("\\\\", "\\")


def _struct_fields(struct_node: Node, source: bytes) -> list[Field]:
    fields: list[Field] = []
    for child in struct_node.named_children:
        if child.type != "field_declaration_list":
            continue
        for decl in child.named_children:
            if decl.type != "field_declaration":
                continue
            names = decl.children_by_field_name("name")
            type_node = decl.child_by_field_name("type")
            if not names or type_node is None:
                # embedded field
                continue
            tag_node = decl.child_by_field_name("tag")
            tag = _unquote_tag(_node_text(tag_node, source)) if tag_node is not None else None
            type_name = _type_name(type_node, source)
            fields.extend(Field(name=_node_text(n, source), type_name=type_name, tag=tag) for n in names)
    return fields


def _type_declarations(decl_node: Node, doc: list[str], source: bytes) -> list[Declaration]:
    declarations: list[Declaration] = []
    for spec in decl_node.named_children:
        if spec.type != "type_spec":
            continue
        name_node = spec.child_by_field_name("name")
        type_node = spec.child_by_field_name("type")
        if name_node is None or type_node is None or type_node.type != "struct_type":
            continue
        declarations.append(
            Declaration(
                name=_node_text(name_node, source),
                fields=_struct_fields(type_node, source),
                doc_comments=doc,
                # the whole declaration, so a grouped "type ( ... )" ends after its ")"
                end_byte=decl_node.end_byte,
                is_generic=spec.child_by_field_name("type_parameters") is not None,
            )
        )
    return declarations


def _receiver_type(method_node: Node, source: bytes) -> str | None:
    receiver = method_node.child_by_field_name("receiver")
    if receiver is None:
        return None
    for param in receiver.named_children:
        if param.type != "parameter_declaration":
            continue
        type_node = param.child_by_field_name("type")
        while type_node is not None and type_node.type in ("pointer_type", "generic_type", "parenthesized_type"):
            if type_node.type == "generic_type":
                type_node = type_node.child_by_field_name("type")
            else:
                type_node = type_node.named_children[0] if type_node.named_children else None
        if type_node is not None:
            return _node_text(type_node, source)
    return None


def parse_source(source: bytes, path: str | Path = "<memory>") -> SourceFile:
    """Parse Go source into the declarations, doc comments and methods the generator needs.

    Doc comments follow go/ast rules: the comment group that ends on the line
    directly above a ``type`` declaration, not counting trailing comments that
    share a line with preceding code.
    """
    parser = get_parser(cast(SupportedLanguage, GO_LANGUAGE))
    tree = parser.parse(source)
    root = tree.root_node

    result = SourceFile(path=str(path), source=source, has_error=root.has_error)
    pending: list[Node] = []
    last_code_row = -1

    for child in root.named_children:
        if child.type == "comment":
            if child.start_point[0] == last_code_row:
                continue
            if pending and child.start_point[0] > pending[-1].end_point[0] + 1:
                pending = []
            pending.append(child)
            continue

        if child.type == "package_clause":
            for sub in child.named_children:
                if sub.type == "package_identifier":
                    result.package_name = _node_text(sub, source)
        elif child.type == "type_declaration":
            doc: list[str] = []
            if pending and pending[-1].end_point[0] >= child.start_point[0] - 1:
                doc = [_node_text(c, source) for c in pending]
            result.declarations.extend(_type_declarations(child, doc, source))
        elif child.type == "method_declaration":
            receiver_type = _receiver_type(child, source)
            name_node = child.child_by_field_name("name")
            if receiver_type and name_node is not None:
                result.methods.append(MethodRef(receiver_type, _node_text(name_node, source)))

        pending = []
        last_code_row = child.end_point[0]

    return result


def require_valid(source_file: SourceFile) -> SourceFile:
    if source_file.has_error:
        raise SourceParseError(source_file.path, "parse error: source contains Go syntax errors")
    return source_file
