"""remove 출력 추출기"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from sstparse.models import CompletionStatus, RemovalStatus, RemovedResource
from sstparse.parsers.common import PatternVariant, first_match, strip_detail

logger = logging.getLogger(__name__)

# "<기호> <Type> <Name> (상세)" - 이름은 여러 단어일 수 있고, 괄호 안 사유는 버린다
REMOVAL_LINE_VARIANTS: tuple[PatternVariant[RemovalStatus], ...] = (
    PatternVariant(
        RemovalStatus.REMOVED,
        re.compile(r"^-[ \t]+(\S+)[ \t]+(\S.*)$"),
    ),
    PatternVariant(
        RemovalStatus.REMOVED,
        re.compile(r"^\|[ \t]*Deleted[ \t]+(\S+)[ \t]+(\S.*)$"),
    ),
    PatternVariant(
        RemovalStatus.FAILED,
        re.compile(r"^[×x!][ \t]+(\S+)[ \t]+(\S.*)$"),
    ),
    PatternVariant(
        RemovalStatus.SKIPPED,
        re.compile(r"^~[ \t]+(\S+)[ \t]+(\S.*)$"),
    ),
)


@dataclass(frozen=True)
class RemoveDetails:
    removed_resources: tuple[RemovedResource, ...]

    @property
    def resources_removed(self) -> int:
        return sum(1 for r in self.removed_resources if r.status == RemovalStatus.REMOVED)

    def completion_override(self) -> Optional[CompletionStatus]:
        """열거된 처리 결과로부터 완료 상태를 결정.

        removed/failed 항목이 하나도 없으면 None (공통 마커 판단 유지).
        """
        removed = self.resources_removed
        failed = sum(1 for r in self.removed_resources if r.status == RemovalStatus.FAILED)
        if removed == 0 and failed == 0:
            return None
        if failed == 0:
            return CompletionStatus.COMPLETE
        if removed > 0:
            return CompletionStatus.PARTIAL
        return CompletionStatus.FAILED


def extract_remove(text: str) -> RemoveDetails:
    """remove 출력에서 리소스별 처리 결과를 추출."""
    resources: list[RemovedResource] = []
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        status, match = first_match(REMOVAL_LINE_VARIANTS, line)
        if match is None:
            continue
        resources.append(
            RemovedResource(type=match.group(1), name=strip_detail(match.group(2)), status=status)
        )

    details = RemoveDetails(removed_resources=tuple(resources))
    logger.debug(
        "remove 파싱: 항목 %d, 삭제 %d", len(resources), details.resources_removed
    )
    return details
