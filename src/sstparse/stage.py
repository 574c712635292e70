"""StageProcessor - Git 컨텍스트로부터 stage 이름 계산"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from sstparse.models import CompletionStatus, StageComputationResult

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "pr-"
DEFAULT_TRUNCATION_LENGTH = 26
PULL_REQUEST_EVENT = "pull_request"

STAGE_ERROR_MESSAGE = "Failed to generate a valid stage name from Git context"

# refs/heads/, feature/ 등 마지막 / 까지의 경로
_PATH_PREFIX_PATTERN = re.compile(r"^.*/")
_NON_ALPHANUMERIC_PATTERN = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class StageConfig:
    """stage 계산 설정"""
    prefix: str = DEFAULT_PREFIX
    truncation_length: int = DEFAULT_TRUNCATION_LENGTH


@dataclass(frozen=True)
class GitContext:
    """stage 계산에 쓰이는 Git 이벤트 정보"""
    event_name: str = ""
    ref: str = ""
    head_ref: str = ""
    pr_head_ref: str = ""

    @property
    def is_pull_request(self) -> bool:
        return self.event_name == PULL_REQUEST_EVENT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> GitContext:
        """GitHub Actions 환경변수와 이벤트 payload 파일에서 컨텍스트 생성."""
        env = os.environ if environ is None else environ
        payload = _load_event_payload(env.get("GITHUB_EVENT_PATH", ""))

        pull_request = payload.get("pull_request")
        pr_head_ref = ""
        if isinstance(pull_request, dict) and isinstance(pull_request.get("head"), dict):
            pr_head_ref = _as_str(pull_request["head"].get("ref"))

        return cls(
            event_name=env.get("GITHUB_EVENT_NAME", ""),
            ref=_as_str(payload.get("ref")) or env.get("GITHUB_REF", ""),
            head_ref=_as_str(payload.get("head_ref")) or env.get("GITHUB_HEAD_REF", ""),
            pr_head_ref=pr_head_ref,
        )

    def candidate_ref(self) -> str:
        """stage 계산에 사용할 ref 선택. 없으면 빈 문자열."""
        if self.is_pull_request:
            candidates = (self.pr_head_ref, self.head_ref, self.ref)
        else:
            candidates = (self.head_ref, self.ref)
        for candidate in candidates:
            if candidate:
                return candidate
        return ""


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _load_event_payload(path: str) -> dict[str, Any]:
    """이벤트 payload JSON 로드. 읽을 수 없으면 빈 dict."""
    if not path:
        return {}
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("이벤트 payload 로드 실패 (무시): %s", exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("이벤트 payload 형식 오류 (무시): %s", type(data).__name__)
        return {}
    return data


def compute_stage_from_ref(ref: str, config: StageConfig = StageConfig()) -> str:
    """ref를 stage 이름으로 변환. 유효한 이름을 만들 수 없으면 빈 문자열.

    숫자로 시작하면 prefix를 붙인 뒤 잘라서, 잘린 길이에 prefix가 포함되게 한다.
    """
    stage = _PATH_PREFIX_PATTERN.sub("", ref or "")
    stage = _NON_ALPHANUMERIC_PATTERN.sub("-", stage.lower()).strip("-")
    if not stage:
        return ""

    if config.prefix and stage[0].isdigit():
        stage = config.prefix + stage

    if 0 < config.truncation_length < len(stage):
        stage = stage[:config.truncation_length].rstrip("-")

    return stage


class StageProcessor:
    """Git 컨텍스트 + 설정 → stage 이름."""

    def __init__(self, config: Optional[StageConfig] = None) -> None:
        self.config = config or StageConfig()

    def process(self, context: GitContext) -> StageComputationResult:
        """stage 계산. ref를 결정할 수 없으면 실패 결과 반환."""
        ref = context.candidate_ref()
        logger.debug("stage 계산: event=%s ref=%s", context.event_name, ref or "(없음)")

        computed = compute_stage_from_ref(ref, self.config) if ref else ""
        if not computed:
            logger.warning("stage 계산 실패: event=%s ref=%r", context.event_name, ref)
            return StageComputationResult(
                success=False,
                computed_stage="",
                ref="",
                event_name=context.event_name,
                is_pull_request=context.is_pull_request,
                exit_code=1,
                error=STAGE_ERROR_MESSAGE,
                completion_status=CompletionStatus.FAILED,
                raw_output=f"Stage computation failed: {STAGE_ERROR_MESSAGE}",
            )

        logger.info("stage 계산 완료: %s → %s", ref, computed)
        return StageComputationResult(
            success=True,
            computed_stage=computed,
            ref=ref,
            event_name=context.event_name,
            is_pull_request=context.is_pull_request,
            raw_output=(
                "Stage computation successful\n"
                f"Event: {context.event_name}\n"
                f"Ref: {ref}\n"
                f"Computed Stage: {computed}"
            ),
        )
