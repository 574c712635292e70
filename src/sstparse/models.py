"""데이터 모델: 작업 결과 레코드

파서가 한 번의 호출로 생성하는 불변 결과 레코드들.
to_dict()는 하위 소비자(outputs, JSON 출력)가 쓰는 camelCase 형태를 만든다.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class Operation(enum.Enum):
    """CLI 작업 종류"""
    DEPLOY = "deploy"
    DIFF = "diff"
    REMOVE = "remove"


class CompletionStatus(enum.Enum):
    """작업 완료 상태 (exit code 기반 success와 별개)"""
    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"


class ResourceStatus(enum.Enum):
    """deploy 리소스 변경 상태"""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class ChangeAction(enum.Enum):
    """diff 계획 변경 종류"""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class RemovalStatus(enum.Enum):
    """remove 리소스 처리 결과"""
    REMOVED = "removed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class OutputEntry:
    """deploy가 내보낸 key/value 출력 한 줄"""
    key: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value}


@dataclass(frozen=True)
class ResourceChange:
    type: str
    name: str
    status: ResourceStatus

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "name": self.name, "status": self.status.value}


@dataclass(frozen=True)
class FailedResource:
    """deploy 중 실패한 리소스 (변경 수에는 포함되지 않음)"""
    type: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "name": self.name}


@dataclass(frozen=True)
class PlannedChange:
    type: str
    name: str
    action: ChangeAction

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "name": self.name, "action": self.action.value}


@dataclass(frozen=True)
class RemovedResource:
    type: str
    name: str
    status: RemovalStatus

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "name": self.name, "status": self.status.value}


@dataclass(frozen=True)
class OperationResult:
    """deploy/diff/remove 공통 결과

    success는 exit_code == 0 에서만 유도되며 파싱 내용과 무관하다.
    모든 필드는 항상 채워진다 (파싱 실패 시 중립 기본값).
    """

    success: bool
    operation: Operation
    stage: str
    app: str
    exit_code: int
    completion_status: CompletionStatus
    permalink: str
    truncated: bool
    raw_output: str
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환 (JSON 직렬화 가능)"""
        return {
            "success": self.success,
            "operation": self.operation.value,
            "stage": self.stage,
            "app": self.app,
            "exitCode": self.exit_code,
            "completionStatus": self.completion_status.value,
            "permalink": self.permalink,
            "truncated": self.truncated,
            "rawOutput": self.raw_output,
            "error": self.error,
        }


@dataclass(frozen=True)
class DeployResult(OperationResult):
    resource_changes: int = 0
    outputs: tuple[OutputEntry, ...] = ()
    resources: tuple[ResourceChange, ...] = ()
    failed_resources: tuple[FailedResource, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({
            "resourceChanges": self.resource_changes,
            "outputs": [o.to_dict() for o in self.outputs],
            "resources": [r.to_dict() for r in self.resources],
            "failedResources": [r.to_dict() for r in self.failed_resources],
        })
        return data


@dataclass(frozen=True)
class DiffResult(OperationResult):
    planned_changes: int = 0
    change_summary: str = ""
    changes: tuple[PlannedChange, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({
            "plannedChanges": self.planned_changes,
            "changeSummary": self.change_summary,
            "changes": [c.to_dict() for c in self.changes],
        })
        return data


@dataclass(frozen=True)
class RemoveResult(OperationResult):
    resources_removed: int = 0
    removed_resources: tuple[RemovedResource, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({
            "resourcesRemoved": self.resources_removed,
            "removedResources": [r.to_dict() for r in self.removed_resources],
        })
        return data


@dataclass(frozen=True)
class StageComputationResult:
    """Git 컨텍스트로부터 계산한 stage 이름"""

    success: bool
    computed_stage: str
    ref: str
    event_name: str
    is_pull_request: bool
    exit_code: int = 0
    error: str = ""
    completion_status: CompletionStatus = CompletionStatus.COMPLETE
    raw_output: str = ""

    @property
    def stage(self) -> str:
        return self.computed_stage

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "operation": "stage",
            "stage": self.computed_stage,
            "computedStage": self.computed_stage,
            "ref": self.ref,
            "eventName": self.event_name,
            "isPullRequest": self.is_pull_request,
            "exitCode": self.exit_code,
            "error": self.error,
            "completionStatus": self.completion_status.value,
            "rawOutput": self.raw_output,
        }

