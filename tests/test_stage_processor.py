"""StageProcessor 테스트"""

import json

import pytest

from sstparse.models import CompletionStatus
from sstparse.stage import (
    STAGE_ERROR_MESSAGE,
    GitContext,
    StageConfig,
    StageProcessor,
    compute_stage_from_ref,
)


class TestComputeStageFromRef:
    def test_numeric_branch_truncated_with_prefix(self):
        """prefix 포함 길이로 자른 뒤 끝 하이픈 제거"""
        config = StageConfig(prefix="pr-", truncation_length=15)
        stage = compute_stage_from_ref(
            "refs/heads/123-my-very-long-feature-branch-name-here", config
        )
        assert stage == "pr-123-my-very"
        assert len(stage) == 14

    def test_non_numeric_branch_has_no_prefix(self):
        assert compute_stage_from_ref("refs/heads/feature-branch") == "feature-branch"

    def test_namespace_segment_stripped(self):
        assert compute_stage_from_ref("refs/heads/feature/login-page") == "login-page"

    def test_lowercase_and_sanitize(self):
        assert compute_stage_from_ref("refs/heads/Fix_Bug.Thing!!") == "fix-bug-thing"

    def test_runs_collapse_to_single_hyphen(self):
        assert compute_stage_from_ref("a__--__b") == "a-b"

    def test_default_truncation(self):
        stage = compute_stage_from_ref("refs/heads/" + "a" * 40)
        assert stage == "a" * 26

    def test_short_name_untouched(self):
        assert compute_stage_from_ref("refs/heads/main") == "main"

    def test_empty_prefix_disables_prefixing(self):
        config = StageConfig(prefix="", truncation_length=26)
        assert compute_stage_from_ref("refs/heads/42-fix", config) == "42-fix"

    def test_custom_prefix(self):
        config = StageConfig(prefix="br-", truncation_length=26)
        assert compute_stage_from_ref("42", config) == "br-42"

    def test_non_positive_length_disables_truncation(self):
        config = StageConfig(truncation_length=0)
        assert compute_stage_from_ref("a" * 40, config) == "a" * 40

    @pytest.mark.parametrize("ref", ["", "refs/heads/", "refs/heads/---", "refs/heads/@@@"])
    def test_nothing_valid_left(self, ref):
        assert compute_stage_from_ref(ref) == ""

    def test_deterministic(self):
        ref = "refs/heads/123-some-branch"
        assert compute_stage_from_ref(ref) == compute_stage_from_ref(ref)


class TestCandidateRef:
    def test_pull_request_prefers_payload_head_ref(self):
        context = GitContext(
            event_name="pull_request",
            ref="refs/pull/7/merge",
            head_ref="env-head",
            pr_head_ref="payload-head",
        )
        assert context.is_pull_request is True
        assert context.candidate_ref() == "payload-head"

    def test_pull_request_falls_back_to_head_ref(self):
        context = GitContext(event_name="pull_request", ref="refs/pull/7/merge", head_ref="feat-x")
        assert context.candidate_ref() == "feat-x"

    def test_push_uses_ref(self):
        context = GitContext(event_name="push", ref="refs/heads/main")
        assert context.is_pull_request is False
        assert context.candidate_ref() == "refs/heads/main"

    def test_push_ignores_pr_payload_ref(self):
        context = GitContext(event_name="push", ref="refs/heads/main", pr_head_ref="other")
        assert context.candidate_ref() == "refs/heads/main"

    def test_no_ref(self):
        assert GitContext(event_name="push").candidate_ref() == ""


class TestGitContextFromEnv:
    def test_env_only(self):
        context = GitContext.from_env({
            "GITHUB_EVENT_NAME": "push",
            "GITHUB_REF": "refs/heads/main",
        })
        assert context.event_name == "push"
        assert context.ref == "refs/heads/main"
        assert context.head_ref == ""
        assert context.pr_head_ref == ""

    def test_pull_request_payload(self, tmp_path):
        event_file = tmp_path / "event.json"
        event_file.write_text(
            json.dumps({"pull_request": {"head": {"ref": "feature/new-ui"}}}),
            encoding="utf-8",
        )
        context = GitContext.from_env({
            "GITHUB_EVENT_NAME": "pull_request",
            "GITHUB_REF": "refs/pull/12/merge",
            "GITHUB_HEAD_REF": "ignored-head",
            "GITHUB_EVENT_PATH": str(event_file),
        })
        assert context.pr_head_ref == "feature/new-ui"
        assert context.candidate_ref() == "feature/new-ui"

    def test_payload_ref_wins_over_env(self, tmp_path):
        event_file = tmp_path / "event.json"
        event_file.write_text(json.dumps({"ref": "refs/heads/from-payload"}), encoding="utf-8")
        context = GitContext.from_env({
            "GITHUB_REF": "refs/heads/from-env",
            "GITHUB_EVENT_PATH": str(event_file),
        })
        assert context.ref == "refs/heads/from-payload"

    def test_missing_payload_file(self, tmp_path, caplog):
        """payload 파일이 없으면 경고 후 환경변수만 사용"""
        context = GitContext.from_env({
            "GITHUB_REF": "refs/heads/main",
            "GITHUB_EVENT_PATH": str(tmp_path / "missing.json"),
        })
        assert context.ref == "refs/heads/main"
        assert "payload" in caplog.text

    @pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
    def test_invalid_payload(self, tmp_path, content):
        """읽을 수 없는 payload는 무시하고 환경변수 값 사용"""
        event_file = tmp_path / "event.json"
        event_file.write_text(content, encoding="utf-8")
        context = GitContext.from_env({
            "GITHUB_EVENT_NAME": "pull_request",
            "GITHUB_HEAD_REF": "env-head",
            "GITHUB_EVENT_PATH": str(event_file),
        })
        assert context.pr_head_ref == ""
        assert context.candidate_ref() == "env-head"

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_EVENT_NAME", "push")
        monkeypatch.setenv("GITHUB_REF", "refs/heads/dev")
        monkeypatch.delenv("GITHUB_EVENT_PATH", raising=False)
        monkeypatch.delenv("GITHUB_HEAD_REF", raising=False)
        assert GitContext.from_env().ref == "refs/heads/dev"


class TestStageProcessor:
    def test_success(self):
        processor = StageProcessor(StageConfig(prefix="pr-", truncation_length=26))
        result = processor.process(GitContext(event_name="push", ref="refs/heads/feature-branch"))

        assert result.success is True
        assert result.computed_stage == "feature-branch"
        assert result.stage == "feature-branch"
        assert result.ref == "refs/heads/feature-branch"
        assert result.event_name == "push"
        assert result.is_pull_request is False
        assert result.exit_code == 0
        assert result.error == ""
        assert result.completion_status == CompletionStatus.COMPLETE
        assert "Computed Stage: feature-branch" in result.raw_output

    def test_pull_request_numeric_branch(self):
        context = GitContext(event_name="pull_request", pr_head_ref="123-add-login")
        result = StageProcessor().process(context)
        assert result.computed_stage == "pr-123-add-login"
        assert result.is_pull_request is True

    def test_missing_ref_fails(self):
        result = StageProcessor().process(GitContext(event_name="push"))
        assert result.success is False
        assert result.exit_code == 1
        assert result.error == STAGE_ERROR_MESSAGE
        assert result.computed_stage == ""
        assert result.completion_status == CompletionStatus.FAILED

    def test_unusable_ref_fails(self, caplog):
        """정리 후 빈 문자열이 되는 ref도 실패로 보고"""
        result = StageProcessor().process(GitContext(event_name="push", ref="refs/heads/!!!"))
        assert result.success is False
        assert result.error == STAGE_ERROR_MESSAGE
        assert "stage 계산 실패" in caplog.text

    def test_default_config(self):
        assert StageProcessor().config == StageConfig()

    def test_to_dict(self):
        result = StageProcessor().process(GitContext(event_name="push", ref="refs/heads/main"))
        data = result.to_dict()
        assert data["operation"] == "stage"
        assert data["computedStage"] == "main"
        assert data["isPullRequest"] is False
        json.dumps(data)
