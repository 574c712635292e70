"""출력 텍스트 섹션 분할기.

빈 줄(공백만 있는 줄 포함)을 경계로 텍스트를 논리 블록으로 나눈다.
"""

import re


# 하나 이상 연속된 빈 줄
_BLANK_LINES_PATTERN = re.compile(r"\n(?:[ \t]*\n)+")


def split_sections(text: str) -> list[str]:
    """텍스트를 섹션 단위로 분할.

    Args:
        text: 분할할 텍스트 (줄바꿈은 \\n으로 정규화된 상태)

    Returns:
        원래 순서를 유지한 섹션 리스트 (빈 섹션 제거)
    """
    if not text or not text.strip():
        return []

    fragments = _BLANK_LINES_PATTERN.split(text)
    return [f.strip() for f in fragments if f.strip()]
