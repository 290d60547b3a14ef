"""
JSON serialization for checkpoints.

On disk the checkpoint uses camelCase keys:
{version, phase, specHash, specPath, outputPath, timestamp, data: {...}}
"""

from __future__ import annotations

from typing import Any

from onboardkit.domain.models import (
    Checkpoint,
    CheckpointData,
    EnhancementKind,
    EnhancementResult,
    RepairResult,
    SpecChange,
    SpecEnhancement,
    ValidationIssue,
    WorkflowPhase,
)


class CheckpointFormatError(ValueError):
    """Raised when a stored checkpoint does not have the expected structure."""


# =============================================================================
# TO DICT
# =============================================================================


def issue_to_dict(issue: ValidationIssue) -> dict[str, Any]:
    return {"path": list(issue.path), "message": issue.message, "code": issue.code}


def repair_result_to_dict(result: RepairResult) -> dict[str, Any]:
    return {
        "repairedSpec": dict(result.repaired_spec),
        "changes": [
            {"path": c.path, "before": c.before, "after": c.after, "reason": c.reason}
            for c in result.changes
        ],
        "explanation": result.explanation,
    }


def enhancement_result_to_dict(result: EnhancementResult) -> dict[str, Any]:
    return {
        "enhancedSpec": dict(result.enhanced_spec),
        "enhancements": [
            {"path": e.path, "before": e.before, "after": e.after, "type": e.kind.value}
            for e in result.enhancements
        ],
        "explanation": result.explanation,
    }


def data_to_dict(data: CheckpointData) -> dict[str, Any]:
    """Serialize populated fields only; absent fields are omitted."""
    out: dict[str, Any] = {}
    if data.validated_spec is not None:
        out["validatedSpec"] = dict(data.validated_spec)
    if data.validation_errors is not None:
        out["validationErrors"] = [issue_to_dict(i) for i in data.validation_errors]
    if data.repaired_spec is not None:
        out["repairedSpec"] = dict(data.repaired_spec)
    if data.repair_result is not None:
        out["repairResult"] = repair_result_to_dict(data.repair_result)
    if data.enhanced_spec is not None:
        out["enhancedSpec"] = dict(data.enhanced_spec)
    if data.enhancement_result is not None:
        out["enhancementResult"] = enhancement_result_to_dict(data.enhancement_result)
    if data.generated_files is not None:
        out["generatedFiles"] = dict(data.generated_files)
    return out


def checkpoint_to_dict(checkpoint: Checkpoint) -> dict[str, Any]:
    return {
        "version": checkpoint.version,
        "phase": int(checkpoint.phase),
        "specHash": checkpoint.spec_hash,
        "specPath": checkpoint.spec_path,
        "outputPath": checkpoint.output_path,
        "timestamp": checkpoint.timestamp,
        "data": data_to_dict(checkpoint.data),
    }


# =============================================================================
# FROM DICT
# =============================================================================


def _require(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in data:
        raise CheckpointFormatError(f"Missing field '{key}'")
    value = data[key]
    if not isinstance(value, kind):
        raise CheckpointFormatError(f"Field '{key}' has unexpected type")
    return value


def _optional_mapping(data: dict[str, Any], key: str) -> dict[str, Any] | None:
    if data.get(key) is None:
        return None
    return _require(data, key, dict)


def issue_from_dict(data: dict[str, Any]) -> ValidationIssue:
    return ValidationIssue(
        path=tuple(str(p) for p in _require(data, "path", list)),
        message=_require(data, "message", str),
        code=_require(data, "code", str),
    )


def repair_result_from_dict(data: dict[str, Any]) -> RepairResult:
    return RepairResult(
        repaired_spec=_require(data, "repairedSpec", dict),
        changes=tuple(
            SpecChange(
                path=_require(c, "path", str),
                before=c.get("before"),
                after=c.get("after"),
                reason=c.get("reason", ""),
            )
            for c in _require(data, "changes", list)
        ),
        explanation=data.get("explanation", ""),
    )


def enhancement_result_from_dict(data: dict[str, Any]) -> EnhancementResult:
    return EnhancementResult(
        enhanced_spec=_require(data, "enhancedSpec", dict),
        enhancements=tuple(
            SpecEnhancement(
                path=_require(e, "path", str),
                before=e.get("before", ""),
                after=e.get("after", ""),
                kind=EnhancementKind(e.get("type", "general")),
            )
            for e in _require(data, "enhancements", list)
        ),
        explanation=data.get("explanation", ""),
    )


def data_from_dict(data: dict[str, Any]) -> CheckpointData:
    errors = data.get("validationErrors")
    repair = _optional_mapping(data, "repairResult")
    enhance = _optional_mapping(data, "enhancementResult")
    files = _optional_mapping(data, "generatedFiles")
    if files is not None and not all(isinstance(v, str) for v in files.values()):
        raise CheckpointFormatError("generatedFiles must map paths to strings")

    return CheckpointData(
        validated_spec=_optional_mapping(data, "validatedSpec"),
        validation_errors=(
            tuple(issue_from_dict(i) for i in _require(data, "validationErrors", list))
            if errors is not None
            else None
        ),
        repaired_spec=_optional_mapping(data, "repairedSpec"),
        repair_result=repair_result_from_dict(repair) if repair is not None else None,
        enhanced_spec=_optional_mapping(data, "enhancedSpec"),
        enhancement_result=(
            enhancement_result_from_dict(enhance) if enhance is not None else None
        ),
        generated_files=files,
    )


def checkpoint_from_dict(data: Any) -> Checkpoint:
    """Deserialize a checkpoint.

    Raises:
        CheckpointFormatError: If the structure does not match
    """
    if not isinstance(data, dict):
        raise CheckpointFormatError("Checkpoint must be a JSON object")

    phase = _require(data, "phase", int)
    try:
        workflow_phase = WorkflowPhase(phase)
    except ValueError as e:
        raise CheckpointFormatError(f"Invalid phase: {phase}") from e

    return Checkpoint(
        version=_require(data, "version", str),
        phase=workflow_phase,
        spec_hash=_require(data, "specHash", str),
        spec_path=_require(data, "specPath", str),
        output_path=_require(data, "outputPath", str),
        timestamp=_require(data, "timestamp", str),
        data=data_from_dict(_require(data, "data", dict)),
    )
