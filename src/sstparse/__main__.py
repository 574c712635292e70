"""sstparse CLI

사용법:
    sst deploy --stage staging 2>&1 | python -m sstparse deploy --stage staging --exit-code $?
    python -m sstparse diff --stage pr-42 --exit-code 0 --input diff.log
    python -m sstparse stage --prefix pr- --truncation-length 26 --github-output
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from sstparse.config import Config, ConfigurationError
from sstparse.models import Operation
from sstparse.outputs import format_outputs, write_github_output
from sstparse.parsers import parse_output
from sstparse.stage import GitContext, StageConfig, StageProcessor

logger = logging.getLogger("sstparse")

EXIT_CONFIG_ERROR = 2


def _setup_logging() -> None:
    """로깅 설정 (stdout은 JSON 결과 전용이므로 stderr로 출력)"""
    logging.basicConfig(
        level=Config.log_level(),
        format="[%(asctime)s] sstparse: [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sstparse",
        description="SST CLI 출력을 구조화된 JSON 결과로 변환",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for op in Operation:
        p = sub.add_parser(op.value, help=f"{op.value} 출력 파싱")
        p.add_argument("--stage", required=True, help="대상 stage 이름")
        p.add_argument("--exit-code", type=int, required=True, help="CLI 종료 코드")
        p.add_argument("--input", type=Path, default=None, help="출력 파일 (기본: stdin)")
        p.add_argument(
            "--max-output-size", type=int, default=None,
            help="출력 크기 제한 (기본: SSTPARSE_MAX_OUTPUT_SIZE, 0 = 제한 없음)",
        )
        p.add_argument("--github-output", action="store_true", help="GITHUB_OUTPUT 파일에도 기록")

    p = sub.add_parser("stage", help="Git 컨텍스트로 stage 이름 계산")
    p.add_argument("--prefix", default=None, help="숫자로 시작할 때 붙일 접두사")
    p.add_argument("--truncation-length", type=int, default=None, help="stage 최대 길이")
    p.add_argument("--github-output", action="store_true", help="GITHUB_OUTPUT 파일에도 기록")

    return parser


def _invalid_arguments(args: argparse.Namespace) -> list[str]:
    """설정값과 같은 범위 규칙으로 CLI 인자 검증"""
    invalid = []
    truncation_length = getattr(args, "truncation_length", None)
    if truncation_length is not None and truncation_length < 1:
        invalid.append("--truncation-length")
    max_output_size = getattr(args, "max_output_size", None)
    if max_output_size is not None and max_output_size < 0:
        invalid.append("--max-output-size")
    return invalid


def _read_input(path: Optional[Path]) -> str:
    if path is None:
        return sys.stdin.read()
    return path.read_bytes().decode("utf-8", errors="replace")


def _emit(result, github_output: bool) -> int:
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))

    if github_output:
        target = os.environ.get("GITHUB_OUTPUT")
        if target:
            write_github_output(format_outputs(result), target)
        else:
            logger.warning("GITHUB_OUTPUT 환경변수가 없어 출력 기록을 건너뜁니다")

    return 0 if result.success else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    _setup_logging()

    try:
        Config.validate()
    except ConfigurationError as e:
        logger.error("%s", e)
        return EXIT_CONFIG_ERROR

    invalid_args = _invalid_arguments(args)
    if invalid_args:
        logger.error("잘못된 인자 값: %s", ", ".join(invalid_args))
        return EXIT_CONFIG_ERROR

    if args.command == "stage":
        defaults = Config.stage_config()
        config = StageConfig(
            prefix=defaults.prefix if args.prefix is None else args.prefix,
            truncation_length=(
                defaults.truncation_length
                if args.truncation_length is None
                else args.truncation_length
            ),
        )
        result = StageProcessor(config).process(GitContext.from_env())
        return _emit(result, args.github_output)

    max_size = Config.MAX_OUTPUT_SIZE if args.max_output_size is None else args.max_output_size
    try:
        raw = _read_input(args.input)
    except OSError as e:
        logger.error("출력 파일을 읽을 수 없습니다: %s", e)
        return EXIT_CONFIG_ERROR

    result = parse_output(
        args.command,
        raw,
        args.stage,
        args.exit_code,
        max_output_size=max_size,
    )
    return _emit(result, args.github_output)


if __name__ == "__main__":
    sys.exit(main())
