"""공통 추출기

모든 작업 출력에 공통으로 나타나는 필드(App, Permalink, 완료 마커)를 추출한다.
CLI 출력 문법은 버전에 따라 바뀌므로, 개념마다 (태그, 패턴) 변형 목록을
순서대로 시도하고 처음 매치된 변형을 채택한다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, TypeVar

from sstparse.models import CompletionStatus

T = TypeVar("T")

_LINE_BREAK = re.compile(r"\r\n?")

# 줄 패턴은 값을 줄 끝까지 탐욕적으로 잡고, 공백/괄호 상세 정리는 파이썬에서 한다

# "App: x" / "➜  App:   x"
_APP_PATTERN = re.compile(r"^[ \t]*(?:➜[ \t]*)?App:[ \t]*(\S.*)$", re.MULTILINE)

# "Permalink https://..." / "↗  Permalink: https://..."
_PERMALINK_PATTERN = re.compile(
    r"^[ \t]*(?:↗[ \t]*)?Permalink:?[ \t]+(https?://\S+)", re.MULTILINE
)

_ERROR_PATTERN = re.compile(r"^[ \t]*Error:[ \t]*(\S.*)$", re.MULTILINE)


@dataclass(frozen=True)
class PatternVariant(Generic[T]):
    """문법 변형 하나: 매치되면 tag를 결과로 돌려준다."""

    tag: T
    pattern: re.Pattern


def first_match(
    variants: Iterable[PatternVariant[T]], text: str
) -> tuple[Optional[T], Optional[re.Match]]:
    """변형 목록을 순서대로 시도하여 첫 매치의 (tag, match)를 반환."""
    for variant in variants:
        match = variant.pattern.search(text)
        if match:
            return variant.tag, match
    return None, None


# 우선순위 순서: 성공 > 부분 > 실패. 여러 마커가 섞여 있으면 앞쪽이 이긴다.
COMPLETION_MARKERS: tuple[PatternVariant[CompletionStatus], ...] = (
    PatternVariant(
        CompletionStatus.COMPLETE,
        re.compile(r"^[ \t]*✓[ \t]+Complete\b", re.MULTILINE),
    ),
    PatternVariant(
        CompletionStatus.PARTIAL,
        re.compile(r"^[ \t]*⚠[ \t]+Partial\b", re.MULTILINE),
    ),
    PatternVariant(
        CompletionStatus.FAILED,
        re.compile(r"^[ \t]*[✗✕✖×][ \t]+Failed\b", re.MULTILINE),
    ),
)


@dataclass(frozen=True)
class CommonInfo:
    """공통 추출 결과. 찾지 못한 필드는 None."""

    app: Optional[str] = None
    permalink: Optional[str] = None
    completion_status: Optional[CompletionStatus] = None
    error: Optional[str] = None

    @property
    def resolved_status(self) -> CompletionStatus:
        """마커가 없으면 failed"""
        return self.completion_status or CompletionStatus.FAILED


def strip_detail(text: str) -> str:
    """끝에 붙은 괄호 상세 "(...)"를 떼어낸 이름을 반환.

    "my handler (1.2s)" → "my handler". 괄호 앞에 공백이 없거나
    괄호 안에 ")"가 있으면 상세로 보지 않고 그대로 둔다.
    """
    text = text.rstrip()
    if not text.endswith(")"):
        return text
    open_at = text.rfind("(", 0, len(text) - 1)
    if open_at <= 0 or open_at == len(text) - 2 or ")" in text[open_at + 1:-1]:
        return text
    if text[open_at - 1] not in " \t":
        return text
    return text[:open_at].rstrip()


def normalize_text(raw: Any) -> str:
    """입력을 파싱 가능한 문자열로 정규화.

    None/비문자열은 빈 문자열, bytes는 UTF-8(대체 문자)로 디코드.
    줄바꿈은 \\n으로 통일한다.
    """
    if raw is None:
        return ""
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8", errors="replace")
    if not isinstance(raw, str):
        return ""
    return _LINE_BREAK.sub("\n", raw)


def extract_common(text: str) -> CommonInfo:
    """App, Permalink, 완료 상태, 에러 메시지를 추출.

    Args:
        text: normalize_text()를 거친 출력 텍스트

    Returns:
        CommonInfo (없는 필드는 None)
    """
    app_match = _APP_PATTERN.search(text)
    permalink_match = _PERMALINK_PATTERN.search(text)
    error_match = _ERROR_PATTERN.search(text)
    status, _ = first_match(COMPLETION_MARKERS, text)

    return CommonInfo(
        app=app_match.group(1).strip() if app_match else None,
        permalink=permalink_match.group(1).strip() if permalink_match else None,
        completion_status=status,
        error=error_match.group(1).strip() if error_match else None,
    )
