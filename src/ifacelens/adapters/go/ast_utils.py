"""Go AST utility functions.

This module provides utility functions for extracting information
from tree-sitter AST nodes for Go source code.
"""

from __future__ import annotations

from tree_sitter import Node

# Node types naming a method inside an interface body (older grammars use
# method_spec) and an embedded interface reference.
INTERFACE_METHOD_NODES = frozenset({"method_elem", "method_spec"})
INTERFACE_EMBED_NODES = frozenset({"type_elem", "constraint_elem", "interface_type_name"})


class GoAstUtils:
    """Go AST utility functions for tree-sitter nodes."""

    @staticmethod
    def get_node_text(node: Node, content: bytes) -> str:
        """Get the text content of a node.

        Args:
            node: The AST node
            content: Source file content

        Returns:
            The text content of the node
        """
        return content[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def get_line(node: Node) -> int:
        """Get the 0-based row of a node, i.e. its source line minus one."""
        return node.start_point[0]

    @staticmethod
    def get_base_type_name(type_node: Node, content: bytes) -> tuple[str, bool]:
        """Get the base type name of a type expression, stripping pointers.

        Handles ``T``, ``*T``, ``pkg.T``, ``T[P]`` and parenthesized forms.

        Args:
            type_node: The type AST node
            content: Source file content

        Returns:
            Tuple of (type name, is_pointer); the name is empty when the
            expression does not name a type (maps, funcs, literals...)
        """
        node_type = type_node.type
        if node_type in ("type_identifier", "qualified_type"):
            return GoAstUtils.get_node_text(type_node, content), False
        if node_type == "pointer_type":
            for child in type_node.named_children:
                name, _ = GoAstUtils.get_base_type_name(child, content)
                return name, True
            return "", True
        if node_type == "generic_type":
            inner = type_node.child_by_field_name("type")
            if inner is not None:
                return GoAstUtils.get_base_type_name(inner, content)
            return "", False
        if node_type == "parenthesized_type":
            for child in type_node.named_children:
                return GoAstUtils.get_base_type_name(child, content)
        return "", False

    @staticmethod
    def extract_package(root: Node, content: bytes) -> str:
        """Extract package name from the AST.

        Args:
            root: Root node of the AST
            content: Source file content

        Returns:
            Package name or empty string
        """
        for child in root.children:
            if child.type == "package_clause":
                for node in child.children:
                    if node.type == "package_identifier":
                        return GoAstUtils.get_node_text(node, content)
        return ""

    @staticmethod
    def extract_receiver_type(receiver_node: Node, content: bytes) -> tuple[str, bool]:
        """Extract the receiver type name from a method receiver.

        Args:
            receiver_node: The receiver parameter list node
            content: Source file content

        Returns:
            Tuple of (receiver type name without pointer, is_pointer); the
            name is empty when no receiver type can be found
        """
        for child in receiver_node.children:
            if child.type == "parameter_declaration":
                type_node = child.child_by_field_name("type")
                if type_node is not None:
                    return GoAstUtils.get_base_type_name(type_node, content)
        return "", False

    @staticmethod
    def embedded_field_type(field_node: Node, content: bytes) -> tuple[str, bool]:
        """Resolve the type of an embedded struct field.

        The grammar writes ``*Base`` either as a ``pointer_type`` node or as a
        bare ``*`` token followed by the type.
        """
        type_node = field_node.child_by_field_name("type")
        if type_node is None:
            return "", False
        name, is_pointer = GoAstUtils.get_base_type_name(type_node, content)
        if not is_pointer:
            is_pointer = any(c.type == "*" for c in field_node.children)
        return name, is_pointer

    @staticmethod
    def field_names(field_node: Node, content: bytes) -> list[str]:
        """Names declared by a field declaration (empty for embedded fields)."""
        return [
            GoAstUtils.get_node_text(c, content)
            for c in field_node.children_by_field_name("name")
        ]

    @staticmethod
    def leading_comments(node: Node, content: bytes) -> list[str]:
        """Comments directly above a node, without blank lines in between.

        Args:
            node: The declaration node
            content: Source file content

        Returns:
            Comment texts in source order
        """
        comments: list[str] = []
        anchor = node
        sibling = node.prev_sibling
        while sibling is not None and sibling.type == "comment":
            if sibling.end_point[0] < anchor.start_point[0] - 1:
                break
            comments.append(GoAstUtils.get_node_text(sibling, content))
            anchor = sibling
            sibling = sibling.prev_sibling
        comments.reverse()
        return comments

    @staticmethod
    def trailing_comment(node: Node, content: bytes) -> str | None:
        """Comment starting on the row where ``node`` ends, if any."""
        sibling = node.next_sibling
        while sibling is not None and sibling.type == ";":
            sibling = sibling.next_sibling
        if (
            sibling is not None
            and sibling.type == "comment"
            and sibling.start_point[0] == node.end_point[0]
        ):
            return GoAstUtils.get_node_text(sibling, content)
        return None
