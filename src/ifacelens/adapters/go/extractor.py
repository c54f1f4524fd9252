"""Go symbol extraction for interface resolution.

This module walks the tree-sitter tree of a single Go file and collects the
declarations interface satisfaction depends on: interfaces and their method
names, structs and their fields, and methods with their receivers.
"""

from __future__ import annotations

import logging

from tree_sitter import Language, Node, Parser

from ifacelens.adapters.base import ExtractionOutcome, ExtractionStatus
from ifacelens.adapters.go.annotations import AnnotationParser
from ifacelens.adapters.go.ast_utils import (
    INTERFACE_EMBED_NODES,
    INTERFACE_METHOD_NODES,
    GoAstUtils,
)
from ifacelens.core.errors import ParseFailureError
from ifacelens.core.models import (
    FieldDecl,
    FileSymbols,
    InterfaceDecl,
    MethodImpl,
    MethodSignature,
    StructDecl,
)

logger = logging.getLogger(__name__)


class GoSymbolExtractor:
    """Extract a per-file symbol table from Go source.

    A fresh ``Parser`` is created for every call so one extractor can be
    shared by worker threads; the ``Language`` itself is read-only.
    """

    def __init__(
        self,
        language: Language,
        annotation_parser: AnnotationParser | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            language: Loaded tree-sitter Go language
            annotation_parser: Parser for explicit implementation assertions
        """
        self._language = language
        self._annotations = annotation_parser or AnnotationParser()

    def extract(self, source: bytes | str, file_path: str) -> ExtractionOutcome:
        """Extract declarations from one file's source.

        Syntax errors do not stop extraction: whatever the error-tolerant
        tree still contains is returned, tagged ``PARSE_FAILURE``.

        Args:
            source: Go source text
            file_path: Path recorded on every declaration

        Returns:
            ExtractionOutcome carrying the file's symbols

        Raises:
            ParseFailureError: If tree-sitter produces no tree at all
        """
        content = source.encode("utf-8") if isinstance(source, str) else source
        try:
            tree = Parser(self._language).parse(content)
        except Exception as e:
            raise ParseFailureError(f"Cannot parse {file_path}: {e}", file_path) from e
        root = tree.root_node

        symbols = FileSymbols(
            file_path=file_path,
            package_name=GoAstUtils.extract_package(root, content),
        )
        source_text = content.decode("utf-8", errors="replace")

        for child in root.children:
            if child.type == "type_declaration":
                self._extract_type_declaration(child, content, source_text, symbols)
            elif child.type == "method_declaration":
                method = self._extract_method(child, content, file_path)
                if method is not None:
                    symbols.methods.append(method)

        if root.has_error:
            return ExtractionOutcome(
                file_path=file_path,
                symbols=symbols,
                status=ExtractionStatus.PARSE_FAILURE,
                message=f"Syntax errors in {file_path}; extracted declarations are partial",
            )
        return ExtractionOutcome(file_path=file_path, symbols=symbols)

    def _extract_type_declaration(
        self,
        node: Node,
        content: bytes,
        source_text: str,
        symbols: FileSymbols,
    ) -> None:
        """Extract every type spec of a (possibly grouped) type declaration."""
        for spec in node.children:
            if spec.type != "type_spec":
                continue
            name_node = spec.child_by_field_name("name")
            type_node = spec.child_by_field_name("type")
            if name_node is None or type_node is None:
                continue

            name = GoAstUtils.get_node_text(name_node, content)
            line = GoAstUtils.get_line(name_node)

            if type_node.type == "interface_type":
                symbols.interfaces.append(
                    self._extract_interface(name, line, type_node, content, symbols.file_path)
                )
            elif type_node.type == "struct_type":
                struct = self._extract_struct(name, line, type_node, content, symbols.file_path)
                struct.explicit_interfaces = self._explicit_interfaces(
                    name, spec, node, content, source_text
                )
                symbols.structs.append(struct)

    def _extract_interface(
        self,
        name: str,
        line: int,
        interface_node: Node,
        content: bytes,
        file_path: str,
    ) -> InterfaceDecl:
        """Extract required method names and the embedded interface.

        Only the first embedded interface is kept.
        """
        iface = InterfaceDecl(name=name, line=line, file_path=file_path)

        for elem in self._interface_elements(interface_node):
            if elem.type in INTERFACE_METHOD_NODES:
                method_name = elem.child_by_field_name("name")
                if method_name is None:
                    continue
                iface.methods.append(
                    MethodSignature(
                        name=GoAstUtils.get_node_text(method_name, content),
                        line=GoAstUtils.get_line(elem),
                        file_path=file_path,
                    )
                )
            elif elem.type in INTERFACE_EMBED_NODES:
                embedded = self._embedded_interface_name(elem, content)
                if not embedded:
                    continue
                if iface.embedded_interface is None:
                    iface.embedded_interface = embedded
                else:
                    logger.debug(
                        f"Interface {name} embeds {embedded}; only "
                        f"{iface.embedded_interface} is tracked"
                    )

        return iface

    @staticmethod
    def _interface_elements(interface_node: Node) -> list[Node]:
        elements: list[Node] = []
        for child in interface_node.named_children:
            # Older grammars wrap the body in a method_spec_list
            if child.type == "method_spec_list":
                elements.extend(child.named_children)
            else:
                elements.append(child)
        return elements

    @staticmethod
    def _embedded_interface_name(elem: Node, content: bytes) -> str:
        if elem.type == "interface_type_name":
            return GoAstUtils.get_node_text(elem, content)
        for child in elem.named_children:
            name, _ = GoAstUtils.get_base_type_name(child, content)
            if name:
                return name
        return ""

    def _extract_struct(
        self,
        name: str,
        line: int,
        struct_node: Node,
        content: bytes,
        file_path: str,
    ) -> StructDecl:
        """Extract struct fields, marking embedded ones."""
        struct = StructDecl(name=name, line=line, file_path=file_path)

        for child in struct_node.children:
            if child.type != "field_declaration_list":
                continue
            for field in child.children:
                if field.type != "field_declaration":
                    continue
                field_line = GoAstUtils.get_line(field)
                names = GoAstUtils.field_names(field, content)

                if not names:
                    type_name, is_pointer = GoAstUtils.embedded_field_type(field, content)
                    if not type_name:
                        continue
                    struct.fields.append(
                        FieldDecl(
                            name=type_name,
                            type_name=type_name,
                            line=field_line,
                            file_path=file_path,
                            embedded=True,
                            is_pointer=is_pointer,
                        )
                    )
                    continue

                type_node = field.child_by_field_name("type")
                type_name, is_pointer = (
                    GoAstUtils.get_base_type_name(type_node, content)
                    if type_node is not None
                    else ("", False)
                )
                if not type_name and type_node is not None:
                    type_name = GoAstUtils.get_node_text(type_node, content)
                for field_name in names:
                    struct.fields.append(
                        FieldDecl(
                            name=field_name,
                            type_name=type_name,
                            line=field_line,
                            file_path=file_path,
                            embedded=False,
                            is_pointer=is_pointer,
                        )
                    )

        return struct

    def _explicit_interfaces(
        self,
        struct_name: str,
        spec: Node,
        declaration: Node,
        content: bytes,
        source_text: str,
    ) -> list[str]:
        """Collect interfaces asserted for a struct.

        The type spec's own doc comment is preferred; the enclosing ``type``
        declaration's doc comment is consulted when the type spec has none.
        """
        comments = GoAstUtils.leading_comments(spec, content)
        if not comments:
            comments = GoAstUtils.leading_comments(declaration, content)

        trailing = GoAstUtils.trailing_comment(spec, content)
        if trailing is None and spec.next_sibling is None:
            # Ungrouped declaration: the comment follows the whole declaration
            trailing = GoAstUtils.trailing_comment(declaration, content)
        if trailing is not None:
            comments.append(trailing)

        names = self._annotations.parse_comments(comments, struct_name)
        for iface in self._annotations.find_static_assertions(source_text, struct_name):
            if iface not in names:
                names.append(iface)
        return names

    def _extract_method(
        self, node: Node, content: bytes, file_path: str
    ) -> MethodImpl | None:
        """Extract a method declaration; receivers without a type name are dropped."""
        name_node = node.child_by_field_name("name")
        receiver_node = node.child_by_field_name("receiver")
        if name_node is None or receiver_node is None:
            return None

        receiver_type, is_pointer = GoAstUtils.extract_receiver_type(receiver_node, content)
        if not receiver_type:
            logger.debug(
                f"Dropping method without receiver type at "
                f"{file_path}:{node.start_point[0] + 1}"
            )
            return None

        return MethodImpl(
            receiver_type=receiver_type,
            method_name=GoAstUtils.get_node_text(name_node, content),
            line=GoAstUtils.get_line(node),
            file_path=file_path,
            is_pointer=is_pointer,
        )
