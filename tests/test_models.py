"""결과 레코드 모델 테스트"""

import dataclasses
import json

import pytest

from sstparse.models import (
    ChangeAction,
    CompletionStatus,
    DeployResult,
    DiffResult,
    FailedResource,
    Operation,
    OutputEntry,
    PlannedChange,
    RemovalStatus,
    RemovedResource,
    RemoveResult,
    ResourceChange,
    ResourceStatus,
    StageComputationResult,
)


def _base(**overrides):
    fields = {
        "success": True,
        "operation": Operation.DEPLOY,
        "stage": "dev",
        "app": "my-app",
        "exit_code": 0,
        "completion_status": CompletionStatus.COMPLETE,
        "permalink": "https://console.sst.dev/x",
        "truncated": False,
        "raw_output": "raw",
    }
    fields.update(overrides)
    return fields


class TestOperationResult:
    def test_immutable(self):
        result = DeployResult(**_base())
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.app = "other"

    def test_defaults(self):
        result = DeployResult(**_base())
        assert result.resource_changes == 0
        assert result.outputs == ()
        assert result.resources == ()
        assert result.failed_resources == ()
        assert result.error == ""

    def test_base_dict_keys(self):
        data = DiffResult(**_base(operation=Operation.DIFF)).to_dict()
        assert data["operation"] == "diff"
        assert data["exitCode"] == 0
        assert data["completionStatus"] == "complete"
        assert data["rawOutput"] == "raw"


class TestDeployResultDict:
    def test_nested_records(self):
        result = DeployResult(
            **_base(),
            resource_changes=1,
            outputs=(OutputEntry("Web", "https://a.com"),),
            resources=(ResourceChange("Function", "fn", ResourceStatus.CREATED),),
            failed_resources=(FailedResource("Api", "api"),),
        )
        data = result.to_dict()
        assert data["resourceChanges"] == 1
        assert data["outputs"] == [{"key": "Web", "value": "https://a.com"}]
        assert data["resources"] == [{"type": "Function", "name": "fn", "status": "created"}]
        assert data["failedResources"] == [{"type": "Api", "name": "api"}]
        json.dumps(data)


class TestDiffResultDict:
    def test_changes(self):
        result = DiffResult(
            **_base(operation=Operation.DIFF),
            planned_changes=1,
            change_summary="1 change planned",
            changes=(PlannedChange("Api", "api", ChangeAction.UPDATE),),
        )
        data = result.to_dict()
        assert data["plannedChanges"] == 1
        assert data["changeSummary"] == "1 change planned"
        assert data["changes"] == [{"type": "Api", "name": "api", "action": "update"}]


class TestRemoveResultDict:
    def test_removed_resources(self):
        result = RemoveResult(
            **_base(operation=Operation.REMOVE),
            resources_removed=1,
            removed_resources=(
                RemovedResource("Function", "fn", RemovalStatus.REMOVED),
                RemovedResource("Bucket", "b", RemovalStatus.SKIPPED),
            ),
        )
        data = result.to_dict()
        assert data["resourcesRemoved"] == 1
        assert [r["status"] for r in data["removedResources"]] == ["removed", "skipped"]


class TestStageComputationResult:
    def test_stage_alias(self):
        result = StageComputationResult(
            success=True,
            computed_stage="main",
            ref="refs/heads/main",
            event_name="push",
            is_pull_request=False,
        )
        assert result.stage == "main"
        assert result.exit_code == 0
        assert result.completion_status == CompletionStatus.COMPLETE

    def test_failure_dict(self):
        result = StageComputationResult(
            success=False,
            computed_stage="",
            ref="",
            event_name="push",
            is_pull_request=False,
            exit_code=1,
            error="boom",
            completion_status=CompletionStatus.FAILED,
        )
        data = result.to_dict()
        assert data["success"] is False
        assert data["error"] == "boom"
        assert data["exitCode"] == 1
        assert data["completionStatus"] == "failed"
