"""diff 출력 추출기"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from sstparse.models import ChangeAction, PlannedChange
from sstparse.parsers.common import PatternVariant, first_match, strip_detail

logger = logging.getLogger(__name__)

# "+ Function my handler (detail)" - 이름은 여러 단어일 수 있고, 괄호 안 상세 내용은 버린다
CHANGE_LINE_VARIANTS: tuple[PatternVariant[ChangeAction], ...] = (
    PatternVariant(
        ChangeAction.CREATE,
        re.compile(r"^\+[ \t]+(\S+)[ \t]+(\S.*)$"),
    ),
    PatternVariant(
        ChangeAction.UPDATE,
        re.compile(r"^[~*][ \t]+(\S+)[ \t]+(\S.*)$"),
    ),
    PatternVariant(
        ChangeAction.DELETE,
        re.compile(r"^-[ \t]+(\S+)[ \t]+(\S.*)$"),
    ),
)

_SUMMARY_PATTERN = re.compile(
    r"^[ \t]*((\d+)[ \t]+changes?[ \t]+planned|No changes)\b", re.MULTILINE
)


@dataclass(frozen=True)
class DiffDetails:
    planned_changes: int
    change_summary: str
    changes: tuple[PlannedChange, ...]


def extract_diff(text: str) -> DiffDetails:
    """diff 출력에서 계획 변경 목록과 요약 문장을 추출.

    요약 문장에 숫자가 있으면 planned_changes는 그 숫자를 따른다.
    열거된 변경 줄 수와 다를 수 있지만 요약 쪽을 우선한다.
    요약이 없거나 숫자가 없으면 변경 줄 수로 대체한다.
    """
    changes: list[PlannedChange] = []
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        action, match = first_match(CHANGE_LINE_VARIANTS, line)
        if match is None:
            continue
        changes.append(
            PlannedChange(type=match.group(1), name=strip_detail(match.group(2)), action=action)
        )

    summary_match = _SUMMARY_PATTERN.search(text)
    change_summary = summary_match.group(1) if summary_match else ""

    if summary_match and summary_match.group(2):
        planned = int(summary_match.group(2))
        if planned != len(changes):
            logger.debug(
                "diff 요약 수(%d)와 변경 줄 수(%d) 불일치, 요약 우선", planned, len(changes)
            )
    else:
        planned = len(changes)

    return DiffDetails(
        planned_changes=planned,
        change_summary=change_summary,
        changes=tuple(changes),
    )
