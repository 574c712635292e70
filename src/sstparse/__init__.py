"""sstparse - SST CLI 출력 파서 및 stage 이름 계산기

deploy/diff/remove 콘솔 출력을 불변 결과 레코드로 변환하고,
Git 컨텍스트로부터 stage 이름을 계산한다.
"""

from .models import (
    ChangeAction,
    CompletionStatus,
    DeployResult,
    DiffResult,
    FailedResource,
    Operation,
    OperationResult,
    OutputEntry,
    PlannedChange,
    RemovalStatus,
    RemovedResource,
    RemoveResult,
    ResourceChange,
    ResourceStatus,
    StageComputationResult,
)
from .parsers import parse_deploy, parse_diff, parse_output, parse_remove
from .stage import GitContext, StageConfig, StageProcessor, compute_stage_from_ref
from .outputs import derive_urls, format_outputs, write_github_output

__all__ = [
    # models
    "ChangeAction",
    "CompletionStatus",
    "DeployResult",
    "DiffResult",
    "FailedResource",
    "Operation",
    "OperationResult",
    "OutputEntry",
    "PlannedChange",
    "RemovalStatus",
    "RemovedResource",
    "RemoveResult",
    "ResourceChange",
    "ResourceStatus",
    "StageComputationResult",
    # parsers
    "parse_deploy",
    "parse_diff",
    "parse_output",
    "parse_remove",
    # stage
    "GitContext",
    "StageConfig",
    "StageProcessor",
    "compute_stage_from_ref",
    # outputs
    "derive_urls",
    "format_outputs",
    "write_github_output",
]
