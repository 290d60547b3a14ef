"""Tests for FilesystemCheckpointStore and checkpoint serialization."""

import json
import os
import stat
from pathlib import Path

import pytest

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
from onboardkit.infrastructure.persistence import (
    FilesystemCheckpointStore,
    checkpoint_path_for,
    write_json_atomic,
)
from onboardkit.infrastructure.persistence.serialization import (
    CheckpointFormatError,
    checkpoint_from_dict,
    checkpoint_to_dict,
)

SPEC = {"projectName": "Habit Tracker", "theme": {"primary": "#6366F1"}}


def full_checkpoint(spec_path: str) -> Checkpoint:
    """A checkpoint with every data field populated."""
    return Checkpoint(
        phase=WorkflowPhase.REFINEMENT,
        spec_hash="a" * 64,
        spec_path=spec_path,
        output_path="/tmp/out",
        timestamp="2026-01-15T12:00:00+00:00",
        data=CheckpointData(
            validated_spec=None,
            validation_errors=(
                ValidationIssue(("theme", "primary"), "Invalid color", "string_pattern_mismatch"),
            ),
            repaired_spec=SPEC,
            repair_result=RepairResult(
                repaired_spec=SPEC,
                changes=(SpecChange("theme.primary", "purple", "#6366F1", "hex"),),
                explanation="fixed",
            ),
            enhanced_spec=SPEC,
            enhancement_result=EnhancementResult(
                enhanced_spec=SPEC,
                enhancements=(
                    SpecEnhancement("welcome.headline", "a", "b", EnhancementKind.HEADLINE),
                ),
                explanation="better",
            ),
            generated_files={"App.tsx": "export default App;\n"},
        ),
    )


class TestCheckpointPath:
    def test_colocated_with_spec(self, tmp_path) -> None:
        path = checkpoint_path_for(str(tmp_path / "spec.md"))

        assert path.parent == tmp_path / ".onboardkit" / "checkpoints"
        assert path.name.startswith("spec-")
        assert path.suffix == ".json"

    def test_distinct_specs_get_distinct_files(self, tmp_path) -> None:
        a = checkpoint_path_for(str(tmp_path / "spec.md"))
        b = checkpoint_path_for(str(tmp_path / "other" / "spec.md"))
        assert a != b


class TestRoundTrip:
    def test_save_then_load_preserves_everything(self, tmp_path) -> None:
        store = FilesystemCheckpointStore()
        checkpoint = full_checkpoint(str(tmp_path / "spec.md"))

        store.save(checkpoint)
        loaded = store.load(checkpoint.spec_path)

        assert loaded == checkpoint

    def test_on_disk_format_is_camel_case(self, tmp_path) -> None:
        store = FilesystemCheckpointStore()
        checkpoint = full_checkpoint(str(tmp_path / "spec.md"))
        store.save(checkpoint)

        raw = json.loads(store.path_for(checkpoint.spec_path).read_text())

        assert raw["version"] == "1.0"
        assert raw["phase"] == 6
        assert set(raw) == {"version", "phase", "specHash", "specPath", "outputPath", "timestamp", "data"}
        assert "validatedSpec" not in raw["data"]
        assert raw["data"]["enhancementResult"]["enhancements"][0]["type"] == "headline"

    def test_empty_errors_survive(self, tmp_path) -> None:
        checkpoint = Checkpoint(
            WorkflowPhase.SPEC_CHECK,
            "h",
            str(tmp_path / "spec.md"),
            "/o",
            "t",
            CheckpointData(validated_spec=SPEC, validation_errors=()),
        )
        restored = checkpoint_from_dict(checkpoint_to_dict(checkpoint))
        assert restored.data.validation_errors == ()


class TestStoreOperations:
    def test_load_missing_returns_none(self, tmp_path) -> None:
        assert FilesystemCheckpointStore().load(str(tmp_path / "spec.md")) is None

    def test_exists_and_clear(self, tmp_path) -> None:
        store = FilesystemCheckpointStore()
        checkpoint = full_checkpoint(str(tmp_path / "spec.md"))
        store.save(checkpoint)

        assert store.exists(checkpoint.spec_path)
        store.clear(checkpoint.spec_path)
        assert not store.exists(checkpoint.spec_path)
        store.clear(checkpoint.spec_path)  # idempotent

    def test_save_leaves_no_temp_files(self, tmp_path) -> None:
        store = FilesystemCheckpointStore()
        checkpoint = full_checkpoint(str(tmp_path / "spec.md"))
        store.save(checkpoint)
        store.save(checkpoint)

        directory = store.path_for(checkpoint.spec_path).parent
        assert [p.suffix for p in directory.iterdir()] == [".json"]


class TestCorruption:
    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[]",
            '{"phase": 3}',
            '{"version": "1.0", "phase": 42, "specHash": "", "specPath": "", '
            '"outputPath": "", "timestamp": "", "data": {}}',
            '{"version": "1.0", "phase": 4, "specHash": "", "specPath": "", '
            '"outputPath": "", "timestamp": "", "data": {"enhancementResult": '
            '{"enhancedSpec": {}, "enhancements": [{"path": "x", "type": "bogus"}]}}}',
        ],
    )
    def test_unusable_file_loads_as_none(self, tmp_path, content) -> None:
        spec_path = str(tmp_path / "spec.md")
        path = checkpoint_path_for(spec_path)
        path.parent.mkdir(parents=True)
        path.write_text(content, encoding="utf-8")

        assert FilesystemCheckpointStore().load(spec_path) is None

    def test_format_error_names_field(self) -> None:
        with pytest.raises(CheckpointFormatError, match="specHash"):
            checkpoint_from_dict(
                {"version": "1.0", "phase": 1, "specPath": "", "outputPath": "", "timestamp": "", "data": {}}
            )


class TestWriteJsonAtomic:
    def test_replaces_existing_file(self, tmp_path) -> None:
        target = tmp_path / "nested" / "file.json"
        write_json_atomic(target, {"a": 1})
        write_json_atomic(target, {"a": 2})

        assert json.loads(target.read_text()) == {"a": 2}
        assert os.listdir(target.parent) == ["file.json"]

    def test_synced_before_rename(self, tmp_path, monkeypatch) -> None:
        events: list[str] = []
        real_fsync, real_replace = os.fsync, Path.replace

        def fsync(fd: int) -> None:
            events.append("fsync")
            real_fsync(fd)

        def replace(self: Path, target: Path) -> Path:
            events.append("replace")
            return real_replace(self, target)

        monkeypatch.setattr(os, "fsync", fsync)
        monkeypatch.setattr(Path, "replace", replace)

        write_json_atomic(tmp_path / "file.json", {"a": 1})

        assert events == ["fsync", "replace"]

    def test_temp_file_created_with_mode(self, tmp_path, monkeypatch) -> None:
        modes: list[int] = []
        real_replace = Path.replace

        def replace(self: Path, target: Path) -> Path:
            modes.append(stat.S_IMODE(self.stat().st_mode))
            return real_replace(self, target)

        monkeypatch.setattr(Path, "replace", replace)

        write_json_atomic(tmp_path / "secret.json", {"token": "x"}, mode=0o600)

        assert modes == [0o600]
        assert stat.S_IMODE((tmp_path / "secret.json").stat().st_mode) == 0o600
