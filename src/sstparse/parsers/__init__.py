"""CLI 출력 파서

deploy/diff/remove 출력 텍스트를 타입이 있는 결과 레코드로 변환한다.
"""

from .common import (
    COMPLETION_MARKERS,
    CommonInfo,
    PatternVariant,
    extract_common,
    first_match,
    normalize_text,
    strip_detail,
)
from .sections import split_sections
from .deploy import DeployDetails, extract_deploy, extract_outputs
from .diff import DiffDetails, extract_diff
from .remove import RemoveDetails, extract_remove
from .operation import (
    PARSERS,
    parse_deploy,
    parse_diff,
    parse_output,
    parse_remove,
)

__all__ = [
    # common
    "COMPLETION_MARKERS",
    "CommonInfo",
    "PatternVariant",
    "extract_common",
    "first_match",
    "normalize_text",
    "strip_detail",
    # sections
    "split_sections",
    # extractors
    "DeployDetails",
    "extract_deploy",
    "extract_outputs",
    "DiffDetails",
    "extract_diff",
    "RemoveDetails",
    "extract_remove",
    # operation parsers
    "PARSERS",
    "parse_deploy",
    "parse_diff",
    "parse_output",
    "parse_remove",
]
