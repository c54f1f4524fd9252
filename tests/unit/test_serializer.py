"""Unit tests for resolution result serialization."""

import json

import pytest

from ifacelens.core.models import (
    Diagnostic,
    DiagnosticKind,
    InterfaceDecl,
    MethodSignature,
    PackageSymbolTable,
    ResolutionResult,
    ResolutionStatus,
    Satisfaction,
    SatisfactionReason,
    SatisfactionRelation,
)
from ifacelens.core.serializer import (
    SerializationError,
    deserialize,
    deserialize_from_dict,
    serialize,
    serialize_to_dict,
)


@pytest.fixture
def result() -> ResolutionResult:
    return ResolutionResult(
        path="/pkg/a.go",
        directory="/pkg",
        status=ResolutionStatus.PARSE_FAILURE,
        table=PackageSymbolTable(
            path="/pkg",
            name="pkg",
            interfaces=(
                InterfaceDecl(
                    name="Reader",
                    line=2,
                    file_path="/pkg/a.go",
                    methods=[MethodSignature(name="Read", line=3, file_path="/pkg/a.go")],
                ),
            ),
            files=("/pkg/a.go", "/pkg/b.go"),
        ),
        relation=SatisfactionRelation(
            implementations={"Reader": ["File"]},
            method_index={"Read": [("Reader", "File")]},
            satisfactions=[
                Satisfaction(interface="Reader", struct="File", reason=SatisfactionReason.STRUCTURAL)
            ],
        ),
        diagnostics=[
            Diagnostic(path="/pkg/c.go", kind=DiagnosticKind.PARSE_FAILURE, message="bad")
        ],
    )


class TestSerialize:
    def test_json_shape(self, result: ResolutionResult) -> None:
        data = json.loads(serialize(result))
        assert data["status"] == "parse_failure"
        assert data["relation"]["implementations"] == {"Reader": ["File"]}
        assert data["relation"]["method_index"] == {"Read": [["Reader", "File"]]}
        assert data["diagnostics"][0]["kind"] == "parse_failure"

    def test_dict_is_json_compatible(self, result: ResolutionResult) -> None:
        data = serialize_to_dict(result)
        assert data["table"]["files"] == ["/pkg/a.go", "/pkg/b.go"]


class TestDeserialize:
    def test_restores_result(self, result: ResolutionResult) -> None:
        restored = deserialize(serialize(result))
        assert restored == result
        assert restored.relation.method_index["Read"] == [("Reader", "File")]

    def test_invalid_json(self) -> None:
        with pytest.raises(SerializationError) as exc_info:
            deserialize("{not json")
        assert exc_info.value.message == "Invalid JSON format"
        assert exc_info.value.details

    def test_validation_failure(self) -> None:
        with pytest.raises(SerializationError) as exc_info:
            deserialize_from_dict({"path": "/pkg/a.go", "status": "bogus"})
        assert "directory" in (exc_info.value.details or "")
