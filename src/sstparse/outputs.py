"""결과 레코드 → GitHub Actions 출력 변환

모든 값은 문자열이다. 작업과 무관한 키는 빈 문자열로 채운다.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Iterable, Union

from sstparse.models import (
    DeployResult,
    DiffResult,
    OutputEntry,
    RemoveResult,
    StageComputationResult,
)
from sstparse.parsers.operation import AnyOperationResult

logger = logging.getLogger(__name__)

OUTPUT_KEYS: tuple[str, ...] = (
    "success",
    "operation",
    "stage",
    "completion_status",
    "app",
    "permalink",
    "truncated",
    "error",
    "resource_changes",
    "outputs",
    "resources",
    "urls",
    "diff_summary",
    "planned_changes",
    "resources_removed",
    "removed_resources",
    "computed_stage",
    "ref",
    "event_name",
    "is_pull_request",
)

# 출력 키 이름(소문자) → URL 종류
_URL_TYPES = {
    "router": "api",
    "api": "api",
    "web": "web",
    "website": "web",
    "site": "web",
    "function": "function",
}


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _json(items: Iterable[Any]) -> str:
    return json.dumps([item.to_dict() if hasattr(item, "to_dict") else item for item in items])


def derive_urls(outputs: Iterable[OutputEntry]) -> list[dict[str, str]]:
    """deploy 출력 중 URL 값을 {name, url, type}으로 변환."""
    urls = []
    for entry in outputs:
        value = entry.value.strip()
        if not value.startswith(("http://", "https://")):
            continue
        urls.append({
            "name": entry.key,
            "url": value,
            "type": _URL_TYPES.get(entry.key.lower(), "other"),
        })
    return urls


def format_outputs(result: Union[AnyOperationResult, StageComputationResult]) -> dict[str, str]:
    """결과를 GitHub Actions 출력 키 집합으로 변환."""
    outputs = dict.fromkeys(OUTPUT_KEYS, "")
    outputs.update({
        "success": _bool(result.success),
        "stage": result.stage,
        "completion_status": result.completion_status.value,
        "error": result.error,
    })

    if isinstance(result, StageComputationResult):
        outputs.update({
            "operation": "stage",
            "truncated": "false",
            "computed_stage": result.computed_stage,
            "ref": result.ref,
            "event_name": result.event_name,
            "is_pull_request": _bool(result.is_pull_request),
        })
        return outputs

    outputs.update({
        "operation": result.operation.value,
        "app": result.app,
        "permalink": result.permalink,
        "truncated": _bool(result.truncated),
    })

    if isinstance(result, DeployResult):
        outputs.update({
            "resource_changes": str(result.resource_changes),
            "outputs": _json(result.outputs),
            "resources": _json(result.resources),
            "urls": json.dumps(derive_urls(result.outputs)),
        })
    elif isinstance(result, DiffResult):
        outputs.update({
            "resource_changes": str(result.planned_changes),
            "planned_changes": str(result.planned_changes),
            "diff_summary": result.change_summary,
        })
    elif isinstance(result, RemoveResult):
        outputs.update({
            "resource_changes": str(result.resources_removed),
            "resources_removed": str(result.resources_removed),
            "removed_resources": _json(result.removed_resources),
        })
    return outputs


def write_github_output(outputs: dict[str, str], path: Union[str, Path]) -> None:
    """GITHUB_OUTPUT 파일에 key=value 형식으로 추가.

    여러 줄 값은 key<<DELIMITER 형식을 사용한다.
    """
    lines = []
    for key, value in outputs.items():
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            lines.append(f"{key}<<{delimiter}\n{value}\n{delimiter}")
        else:
            lines.append(f"{key}={value}")

    with open(path, "a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    logger.debug("GITHUB_OUTPUT 기록: %d개 키 → %s", len(outputs), path)
