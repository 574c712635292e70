"""Pytest 설정"""

import sys
from pathlib import Path

# src 경로 추가
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
# 출력 샘플 모듈(sst_samples) 경로
sys.path.insert(0, str(Path(__file__).parent))
