"""deploy 출력 추출기

리소스 변경 줄은 두 세대의 문법을 모두 지원한다.
- 파이프 테이블: "|  Created  Function my-handler"  (<Type> <Name>)
- 심볼: "+  my-handler  Function"                    (<Name> <Type>)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from sstparse.models import FailedResource, OutputEntry, ResourceChange, ResourceStatus
from sstparse.parsers.common import COMPLETION_MARKERS, PatternVariant, strip_detail
from sstparse.parsers.sections import split_sections

logger = logging.getLogger(__name__)

# 파이프 테이블의 Failed 줄은 변경이 아니므로 별도 태그로 구분
_FAILED = "failed"

_PIPE_ACTIONS = {
    "Created": ResourceStatus.CREATED,
    "Updated": ResourceStatus.UPDATED,
    "Deleted": ResourceStatus.DELETED,
    "Failed": _FAILED,
}

_SYMBOL_ACTIONS = {
    "+": ResourceStatus.CREATED,
    "*": ResourceStatus.UPDATED,
    "-": ResourceStatus.DELETED,
}

# (tag, pattern) 변형. 그룹: 1=동작, type/name 그룹 위치는 태그로 구분
_PIPE_FORM = "pipe"
_SYMBOL_FORM = "symbol"

RESOURCE_LINE_VARIANTS: tuple[PatternVariant[str], ...] = (
    PatternVariant(
        _PIPE_FORM,
        re.compile(r"^\|[ \t]*(Created|Updated|Deleted|Failed)[ \t]+(\S+)[ \t]+(\S.*)$"),
    ),
    PatternVariant(
        _SYMBOL_FORM,
        re.compile(r"^([+*-])[ \t]+(\S+)[ \t]+(\S+)(.*)$"),
    ),
)

# "Router: https://..." / "api_url = https://..."
_OUTPUT_LINE = re.compile(r"^([A-Za-z_][\w.-]*)[ \t]*[:=][ \t]*(\S.*)$")
_OUTPUTS_HEADER = re.compile(r"^Outputs:?$", re.IGNORECASE)

# 출력값이 아닌 메타 정보 키
_RESERVED_KEYS = frozenset({"app", "stage", "permalink", "duration", "error", "warning"})


@dataclass(frozen=True)
class DeployDetails:
    resources: tuple[ResourceChange, ...]
    failed_resources: tuple[FailedResource, ...]
    outputs: tuple[OutputEntry, ...]

    @property
    def resource_changes(self) -> int:
        return len(self.resources)


def _match_resource_line(line: str) -> Optional[tuple[Union[ResourceStatus, str], str, str]]:
    """한 줄에서 (상태, type, name)을 추출. 매치되지 않으면 None."""
    for variant in RESOURCE_LINE_VARIANTS:
        match = variant.pattern.match(line)
        if not match:
            continue
        if variant.tag == _PIPE_FORM:
            action, type_, rest = match.groups()
            return _PIPE_ACTIONS[action], type_, strip_detail(rest)
        action, name, type_, rest = match.groups()
        # 심볼 형식은 type 뒤에 괄호 상세만 올 수 있다
        if strip_detail(type_ + rest) != type_:
            continue
        return _SYMBOL_ACTIONS[action], type_, name
    return None


def _output_entry(line: str) -> Optional[OutputEntry]:
    match = _OUTPUT_LINE.match(line)
    if not match or match.group(1).lower() in _RESERVED_KEYS:
        return None
    return OutputEntry(key=match.group(1), value=match.group(2).strip())


def _is_block_start(line: str) -> bool:
    """완료 마커(성공/부분) 또는 Outputs 헤더 다음 줄부터 출력 블록."""
    if _OUTPUTS_HEADER.match(line):
        return True
    return any(
        v.pattern.match(line) for v in COMPLETION_MARKERS[:2]
    )


def _outputs_in_section(section: str) -> list[OutputEntry]:
    lines = [line.strip() for line in section.split("\n") if line.strip()]

    # 섹션 전체가 key/value 줄이면 그 자체가 출력 블록
    entries = [_output_entry(line) for line in lines]
    if entries and all(entries):
        return entries

    found: list[OutputEntry] = []
    in_block = False
    for line, entry in zip(lines, entries):
        if _is_block_start(line):
            in_block = True
            continue
        if not in_block:
            continue
        if entry is None:
            in_block = False
            continue
        found.append(entry)
    return found


def extract_outputs(text: str) -> list[OutputEntry]:
    """출력 블록의 key/value 줄을 순서대로 추출."""
    outputs: list[OutputEntry] = []
    for section in split_sections(text):
        outputs.extend(_outputs_in_section(section))
    return outputs


def extract_deploy(text: str) -> DeployDetails:
    """deploy 출력에서 리소스 변경과 출력값을 추출.

    Args:
        text: 정규화된 출력 텍스트

    Returns:
        DeployDetails (매치 없으면 빈 튜플)
    """
    resources: list[ResourceChange] = []
    failed: list[FailedResource] = []

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        parsed = _match_resource_line(line)
        if parsed is None:
            continue
        status, type_, name = parsed
        if status == _FAILED:
            failed.append(FailedResource(type=type_, name=name))
        else:
            resources.append(ResourceChange(type=type_, name=name, status=status))

    outputs = extract_outputs(text)
    logger.debug(
        "deploy 파싱: 변경 %d, 실패 %d, 출력 %d", len(resources), len(failed), len(outputs)
    )
    return DeployDetails(
        resources=tuple(resources),
        failed_resources=tuple(failed),
        outputs=tuple(outputs),
    )
