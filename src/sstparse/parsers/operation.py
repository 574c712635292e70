"""작업별 파서

공통 추출 → 작업별 추출 → 결과 조립 순서로 진행한다.
세 파서는 상속 없이 독립된 함수이며, 호출 측은 Operation 태그로 선택한다.

어떤 입력이 들어와도 예외를 던지지 않고 구조적으로 유효한 결과를 반환한다.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from sstparse.models import (
    CompletionStatus,
    DeployResult,
    DiffResult,
    Operation,
    RemoveResult,
)
from sstparse.parsers.common import CommonInfo, extract_common, normalize_text
from sstparse.parsers.deploy import extract_deploy
from sstparse.parsers.diff import extract_diff
from sstparse.parsers.remove import extract_remove

logger = logging.getLogger(__name__)

AnyOperationResult = Union[DeployResult, DiffResult, RemoveResult]

# exit code를 해석할 수 없을 때 사용하는 값
_UNKNOWN_EXIT_CODE = 1


def _coerce_exit_code(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return _UNKNOWN_EXIT_CODE


def _coerce_stage(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _coerce_raw(value: Any) -> str:
    """raw_output으로 되돌려줄 원문. 줄바꿈은 건드리지 않는다."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return value if isinstance(value, str) else ""


def _apply_size_limit(raw: str, max_output_size: Optional[int]) -> tuple[str, bool]:
    if not isinstance(max_output_size, int) or max_output_size <= 0:
        return raw, False
    if len(raw) <= max_output_size:
        return raw, False
    logger.debug("출력 크기 제한 적용: %d → %d", len(raw), max_output_size)
    return raw[:max_output_size], True


def _base_fields(common: CommonInfo) -> dict[str, Any]:
    return {
        "app": common.app or "",
        "permalink": common.permalink or "",
        "completion_status": common.resolved_status,
        "error": common.error or "",
    }


def _build_deploy(text: str, common: CommonInfo, base: dict[str, Any]) -> DeployResult:
    details = extract_deploy(text)
    return DeployResult(
        **base,
        **_base_fields(common),
        resource_changes=details.resource_changes,
        outputs=details.outputs,
        resources=details.resources,
        failed_resources=details.failed_resources,
    )


def _build_diff(text: str, common: CommonInfo, base: dict[str, Any]) -> DiffResult:
    details = extract_diff(text)
    return DiffResult(
        **base,
        **_base_fields(common),
        planned_changes=details.planned_changes,
        change_summary=details.change_summary,
        changes=details.changes,
    )


def _build_remove(text: str, common: CommonInfo, base: dict[str, Any]) -> RemoveResult:
    details = extract_remove(text)
    fields = _base_fields(common)
    override = details.completion_override()
    if override is not None:
        fields["completion_status"] = override
    return RemoveResult(
        **base,
        **fields,
        resources_removed=details.resources_removed,
        removed_resources=details.removed_resources,
    )


_BUILDERS: dict[Operation, tuple[type, Callable[..., AnyOperationResult]]] = {
    Operation.DEPLOY: (DeployResult, _build_deploy),
    Operation.DIFF: (DiffResult, _build_diff),
    Operation.REMOVE: (RemoveResult, _build_remove),
}


def _parse(
    operation: Operation,
    raw_output: Any,
    stage: Any,
    exit_code: Any,
    max_output_size: Optional[int],
    truncated: bool,
) -> AnyOperationResult:
    result_cls, build = _BUILDERS[operation]
    raw, was_cut = _apply_size_limit(_coerce_raw(raw_output), max_output_size)
    code = _coerce_exit_code(exit_code)
    base = {
        "success": code == 0,
        "operation": operation,
        "stage": _coerce_stage(stage),
        "exit_code": code,
        "truncated": bool(truncated) or was_cut,
        "raw_output": raw,
    }

    try:
        text = normalize_text(raw)
        result = build(text, extract_common(text), base)
    except Exception:
        logger.exception("%s 출력 파싱 실패, 기본 결과 반환", operation.value)
        return result_cls(
            **base,
            app="",
            permalink="",
            completion_status=CompletionStatus.FAILED,
        )

    logger.debug(
        "%s 파싱 완료: app=%s status=%s",
        operation.value,
        result.app,
        result.completion_status.value,
    )
    return result


def parse_deploy(
    raw_output: Any,
    stage: Any,
    exit_code: Any,
    *,
    max_output_size: Optional[int] = None,
    truncated: bool = False,
) -> DeployResult:
    """deploy 출력을 DeployResult로 변환."""
    return _parse(Operation.DEPLOY, raw_output, stage, exit_code, max_output_size, truncated)


def parse_diff(
    raw_output: Any,
    stage: Any,
    exit_code: Any,
    *,
    max_output_size: Optional[int] = None,
    truncated: bool = False,
) -> DiffResult:
    """diff 출력을 DiffResult로 변환."""
    return _parse(Operation.DIFF, raw_output, stage, exit_code, max_output_size, truncated)


def parse_remove(
    raw_output: Any,
    stage: Any,
    exit_code: Any,
    *,
    max_output_size: Optional[int] = None,
    truncated: bool = False,
) -> RemoveResult:
    """remove 출력을 RemoveResult로 변환."""
    return _parse(Operation.REMOVE, raw_output, stage, exit_code, max_output_size, truncated)


PARSERS: dict[Operation, Callable[..., AnyOperationResult]] = {
    Operation.DEPLOY: parse_deploy,
    Operation.DIFF: parse_diff,
    Operation.REMOVE: parse_remove,
}


def parse_output(
    operation: Union[Operation, str],
    raw_output: Any,
    stage: Any,
    exit_code: Any,
    *,
    max_output_size: Optional[int] = None,
    truncated: bool = False,
) -> AnyOperationResult:
    """Operation 태그로 파서를 선택하여 실행.

    Raises:
        ValueError: 알 수 없는 작업 이름 (호출 측 입력 오류)
    """
    op = Operation(operation)
    return PARSERS[op](
        raw_output,
        stage,
        exit_code,
        max_output_size=max_output_size,
        truncated=truncated,
    )
