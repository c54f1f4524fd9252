"""Integration tests for Go symbol extraction.

Runs the real tree-sitter Go grammar over small sources and checks the
declarations, line numbers and comment assertions that come out.
"""

from pathlib import Path

import pytest

from ifacelens.adapters import ExtractionStatus, GoAdapter

IO_SOURCE = """package sample

// Reader reads bytes.
type Reader interface {
	Read(p []byte) (int, error)
}

type ReadCloser interface {
	Reader
	io.Closer
	Close() error
}
"""

FILE_SOURCE = """package sample

// File implements Writer
type File struct {
	name, path string
	*Base
	io.Reader
	cache map[string]int
}

func (f *File) Read(p []byte) (int, error) {
	return 0, nil
}

func (f File) Name() string { return f.name }
"""


@pytest.fixture(scope="module")
def go_adapter() -> GoAdapter:
    """Create a GoAdapter instance."""
    return GoAdapter()


class TestInterfaces:
    """Tests for interface extraction."""

    def test_interface_methods_and_lines(self, go_adapter: GoAdapter) -> None:
        outcome = go_adapter.extract_source(IO_SOURCE, "/pkg/io.go")
        assert outcome.success
        assert outcome.symbols.package_name == "sample"

        reader = outcome.symbols.interfaces[0]
        assert reader.name == "Reader"
        assert reader.line == 3
        assert reader.method_names == ["Read"]
        assert reader.methods[0].line == 4
        assert reader.file_path == "/pkg/io.go"

    def test_only_first_embedded_interface_kept(self, go_adapter: GoAdapter) -> None:
        outcome = go_adapter.extract_source(IO_SOURCE, "/pkg/io.go")
        read_closer = outcome.symbols.interfaces[1]
        assert read_closer.name == "ReadCloser"
        assert read_closer.embedded_interface == "Reader"
        assert read_closer.method_names == ["Close"]


class TestStructs:
    """Tests for struct extraction."""

    def test_fields(self, go_adapter: GoAdapter) -> None:
        outcome = go_adapter.extract_source(FILE_SOURCE, "/pkg/file.go")
        file_struct = outcome.symbols.structs[0]
        assert file_struct.name == "File"
        assert file_struct.line == 3

        fields = {f.name: f for f in file_struct.fields}
        assert set(fields) == {"name", "path", "Base", "io.Reader", "cache"}
        assert fields["name"].type_name == "string"
        assert fields["path"].line == 4
        assert not fields["name"].embedded

    def test_embedded_fields(self, go_adapter: GoAdapter) -> None:
        outcome = go_adapter.extract_source(FILE_SOURCE, "/pkg/file.go")
        embedded = {f.name: f for f in outcome.symbols.structs[0].embedded_fields}
        assert set(embedded) == {"Base", "io.Reader"}
        assert embedded["Base"].is_pointer
        assert embedded["Base"].type_name == "Base"
        assert embedded["Base"].line == 5
        assert not embedded["io.Reader"].is_pointer

    def test_explicit_interfaces_from_doc_comment(self, go_adapter: GoAdapter) -> None:
        outcome = go_adapter.extract_source(FILE_SOURCE, "/pkg/file.go")
        assert outcome.symbols.structs[0].explicit_interfaces == ["Writer"]

    def test_grouped_type_declarations(self, go_adapter: GoAdapter) -> None:
        source = (
            "package p\n"
            "\n"
            "type (\n"
            "\t// A implements Reader\n"
            "\tA struct{}\n"
            "\tB struct{ A }\n"
            "\tShape interface{ Area() float64 }\n"
            ")\n"
        )
        symbols = go_adapter.extract_source(source, "/pkg/g.go").symbols
        assert [s.name for s in symbols.structs] == ["A", "B"]
        assert [s.line for s in symbols.structs] == [4, 5]
        assert symbols.structs[0].explicit_interfaces == ["Reader"]
        assert symbols.structs[1].explicit_interfaces == []
        assert symbols.structs[1].embedded_fields[0].type_name == "A"
        assert symbols.interfaces[0].method_names == ["Area"]

    def test_trailing_comment(self, go_adapter: GoAdapter) -> None:
        source = "package p\n\ntype Buf struct{} // ensure Buf implements Reader, Writer\n"
        symbols = go_adapter.extract_source(source, "/pkg/t.go").symbols
        assert symbols.structs[0].explicit_interfaces == ["Reader", "Writer"]

    def test_static_assertion(self, go_adapter: GoAdapter) -> None:
        source = (
            "package p\n"
            "\n"
            "type Buf struct{}\n"
            "\n"
            "var _ Reader = (*Buf)(nil)\n"
        )
        symbols = go_adapter.extract_source(source, "/pkg/s.go").symbols
        assert symbols.structs[0].explicit_interfaces == ["Reader"]

    def test_comment_separated_by_blank_line_ignored(self, go_adapter: GoAdapter) -> None:
        source = (
            "package p\n"
            "\n"
            "// Buf implements Reader\n"
            "\n"
            "type Buf struct{}\n"
        )
        symbols = go_adapter.extract_source(source, "/pkg/b.go").symbols
        assert symbols.structs[0].explicit_interfaces == []

    def test_non_struct_types_skipped(self, go_adapter: GoAdapter) -> None:
        source = "package p\n\ntype MyInt int\n\ntype Alias = string\n"
        symbols = go_adapter.extract_source(source, "/pkg/n.go").symbols
        assert symbols.structs == []
        assert symbols.interfaces == []


class TestMethods:
    """Tests for method extraction."""

    def test_receivers(self, go_adapter: GoAdapter) -> None:
        outcome = go_adapter.extract_source(FILE_SOURCE, "/pkg/file.go")
        methods = {m.method_name: m for m in outcome.symbols.methods}
        assert methods["Read"].receiver_type == "File"
        assert methods["Read"].is_pointer
        assert methods["Read"].line == 10
        assert methods["Name"].receiver_type == "File"
        assert not methods["Name"].is_pointer

    def test_functions_are_not_methods(self, go_adapter: GoAdapter) -> None:
        source = "package p\n\nfunc Read() {}\n"
        assert go_adapter.extract_source(source, "/pkg/f.go").symbols.methods == []

    def test_generic_receiver(self, go_adapter: GoAdapter) -> None:
        source = "package p\n\ntype Box[T any] struct{ v T }\n\nfunc (b *Box[T]) Get() T { return b.v }\n"
        symbols = go_adapter.extract_source(source, "/pkg/box.go").symbols
        assert symbols.methods[0].receiver_type == "Box"
        assert symbols.methods[0].is_pointer


class TestFailures:
    """Tests for degraded extraction."""

    def test_syntax_error_keeps_partial_symbols(self, go_adapter: GoAdapter) -> None:
        source = (
            "package p\n"
            "\n"
            "type Reader interface {\n"
            "\tRead() int\n"
            "}\n"
            "\n"
            "func broken( {\n"
        )
        outcome = go_adapter.extract_source(source, "/pkg/bad.go")
        assert outcome.status == ExtractionStatus.PARSE_FAILURE
        assert not outcome.success
        assert outcome.diagnostic is not None
        assert [i.name for i in outcome.symbols.interfaces] == ["Reader"]

    def test_unreadable_file(self, go_adapter: GoAdapter, tmp_path: Path) -> None:
        outcome = go_adapter.extract_file(tmp_path / "missing.go")
        assert outcome.status == ExtractionStatus.READ_FAILURE
        assert outcome.symbols.is_empty

    def test_empty_file(self, go_adapter: GoAdapter) -> None:
        outcome = go_adapter.extract_source("", "/pkg/empty.go")
        assert outcome.symbols.is_empty

    def test_grammar_available(self, go_adapter: GoAdapter) -> None:
        assert go_adapter.is_available()


class TestSourceFiles:
    def test_is_source_file(self, go_adapter: GoAdapter) -> None:
        assert go_adapter.is_source_file(Path("a.go"))
        assert go_adapter.is_source_file(Path("a_test.go"))
        assert not go_adapter.is_source_file(Path("a_test.go"), include_test_files=False)
        assert not go_adapter.is_source_file(Path("README.md"))
