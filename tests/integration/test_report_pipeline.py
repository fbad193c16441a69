"""
Integration Tests for Report Pipeline
데이터 패키지 -> 인사이트 리포트 전체 흐름 통합 테스트

Run: pytest tests/integration/test_report_pipeline.py -v
"""

import json
import pytest
from datetime import timedelta
from unittest.mock import patch

from typer.testing import CliRunner

from socialsage.cli import app
from socialsage.core.config import Settings, settings
from socialsage.core.errors import InputError, RuleConfigError
from socialsage.core.pipeline import PipelineStage, ReportPipeline
from socialsage.generators.weekly_performance import RandomTipSelector
from socialsage.models.analysis import MediaBucket, PostingFrequency
from socialsage.models.report import InsightReport


@pytest.fixture
def utc_settings():
    """UTC 기준 설정"""
    return Settings(DEFAULT_TIMEZONE="UTC")


@pytest.fixture
def pipeline(utc_settings):
    return ReportPipeline(utc_settings)


class TestReportPipeline:
    """리포트 파이프라인 통합 테스트"""

    def test_full_report(self, pipeline, raw_package, now):
        """전체 리포트 생성"""
        report = pipeline.run(raw_package, now=now)

        assert isinstance(report, InsightReport)
        assert report.generated_at == now
        assert report.niche == "fitness"
        assert sum(report.media_buckets.values()) == 8
        assert report.post_buckets["p1"] == MediaBucket.REEL
        assert report.posting_patterns.frequency == PostingFrequency.EVERY_FEW_DAYS
        assert report.engagement.top_posts[0].id == "p7"
        assert len(report.growth.growth_rates) == 1
        assert report.content.best_performing_category is not None

    def test_achievements_and_stats(self, pipeline, raw_package, now):
        """업적 + 집계"""
        report = pipeline.run(raw_package, now=now)
        unlocked = {a.id for a in report.unlocked_achievements}

        assert {"followers_1000", "viral_100", "content_diversity", "growth_5"} <= unlocked
        assert "followers_5000" not in unlocked
        assert report.user_stats.total_achievements == len(unlocked)
        assert report.user_stats.latest_unlock is None

    def test_generated_text(self, pipeline, raw_package, now):
        """주간 성과 / 인사이트 / 알림"""
        report = pipeline.run(raw_package, now=now)

        assert report.weekly_wins[0].data["id"] == "p1"
        assert report.smart_insights[0].title == "Perfect Posting Window"
        assert report.notifications[0].scheduled_for > now
        assert report.weekly_performance.current_week.posts == 8

    def test_trends(self, pipeline, raw_package, now):
        """추세 예측 / 참여 예측 포함"""
        report = pipeline.run(raw_package, now=now)
        predictions = {p.id: p for p in report.trends.predictions}

        assert predictions["trend_audience"].prediction.startswith("Rapid")
        assert "trend_format_video" in predictions
        assert "trend_timing_evening" in predictions
        assert [f.metric for f in report.trends.forecasts] == ["likes", "comments", "saves"]
        assert report.trends.recommendations == []

    def test_entity_ids_unique(self, pipeline, raw_package, now):
        """인사이트 / 알림 id는 리포트 안에서 유일"""
        report = pipeline.run(raw_package, now=now)
        ids = [i.id for i in report.smart_insights] + [n.id for n in report.notifications]

        assert len(ids) == len(set(ids))
        assert all(i.id.startswith("insight_") for i in report.smart_insights)
        assert all(n.id.startswith("notification_") for n in report.notifications)

    def test_deterministic(self, pipeline, raw_package, now):
        """같은 입력 + 같은 now -> 같은 리포트"""
        first = pipeline.run(raw_package, now=now)
        second = ReportPipeline(pipeline.settings).run(raw_package, now=now)

        assert first.model_dump(mode="json") == second.model_dump(mode="json")

    def test_json_serializable(self, pipeline, raw_package, now):
        """JSON 직렬화"""
        data = pipeline.run(raw_package, now=now).model_dump(mode="json")
        decoded = json.loads(json.dumps(data))

        assert decoded["media_buckets"]["reel"] == 2
        assert decoded["profile"]["username"] == "sage.creator"

    def test_previous_period(self, pipeline, raw_package, now):
        """이전 기간 비교"""
        previous = {'profile': raw_package['profile'], 'media': raw_package['media'][:4]}
        report = pipeline.run(raw_package, previous=previous, now=now)

        assert report.weekly_performance.previous_week.posts == 4
        assert report.weekly_performance.changes.posts.value == 4
        assert report.weekly_performance.changes.posts.percentage == pytest.approx(100.0)

    def test_empty_package(self, pipeline, now):
        """빈 패키지도 리포트 생성"""
        report = pipeline.run({'profile': {'followers_count': 150}}, now=now)

        assert report.niche == "general"
        assert report.content.recommendations == ["Need more data to generate insights"]
        assert [w.type.value for w in report.weekly_wins] == ["growth_milestone"]
        assert report.optimal_time.is_default is True
        assert report.weekly_performance.top_post.caption == "No posts found"

    def test_rejects_non_mapping(self, pipeline, now):
        """매핑이 아닌 입력 -> InputError"""
        with pytest.raises(InputError):
            pipeline.run(["not", "a", "package"], now=now)

    def test_unknown_timezone(self):
        """알 수 없는 타임존 -> InputError"""
        with pytest.raises(InputError):
            ReportPipeline(Settings(DEFAULT_TIMEZONE="Mars/Olympus_Mons"))


class TestPipelineComposition:
    """설정 / 주입 / 추적 테스트"""

    def test_trace_stages(self, pipeline, raw_package, now):
        """단계 순서 추적"""
        _, trace = pipeline.run_with_trace(raw_package, now=now)

        assert [s.step_name for s in trace.stages] == [
            "classification", "patterns", "engagement", "achievements", "generation",
        ]
        assert trace.current_stage == PipelineStage.COMPLETED
        assert all(s.success for s in trace.stages)
        assert trace.to_dict()["username"] == "sage.creator"

    def test_stage_failure_propagates(self, pipeline, raw_package, now):
        """단계 예외는 그대로 전파"""
        with patch.object(pipeline.posting_analyzer, 'analyze', side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError, match="boom"):
                pipeline.run(raw_package, now=now)

    def test_merge_previous_achievements(self, pipeline, raw_package, now):
        """저장된 업적 상태 병합"""
        first = pipeline.run(raw_package, now=now, previous_achievements=[])
        later = now + timedelta(days=7)
        second = pipeline.run(raw_package, now=later, previous_achievements=first.achievements)

        assert all(a.unlocked_at == now for a in first.unlocked_achievements)
        assert all(a.unlocked_at == now for a in second.unlocked_achievements)
        assert second.user_stats.latest_unlock is not None

    def test_injected_tip_selector(self, utc_settings, raw_package, now):
        """시드 랜덤 팁 선택기 주입"""
        first = ReportPipeline(utc_settings, tip_selector=RandomTipSelector(seed=3)).run(raw_package, now=now)
        second = ReportPipeline(utc_settings, tip_selector=RandomTipSelector(seed=3)).run(raw_package, now=now)

        assert first.weekly_performance.smart_tip == second.weekly_performance.smart_tip

    def test_niche_rules_file(self, tmp_path, raw_package, now):
        """YAML 니치 규칙 파일"""
        rules = tmp_path / "niches.yaml"
        rules.write_text("wellness: [routine, rest]\nfitness: [gym]\n", encoding="utf-8")

        report = ReportPipeline(
            Settings(DEFAULT_TIMEZONE="UTC", NICHE_RULES_PATH=str(rules))
        ).run(raw_package, now=now)

        assert report.niche == "wellness"

    def test_broken_rules_file(self, tmp_path):
        """규칙 파일 오류 -> RuleConfigError"""
        with pytest.raises(RuleConfigError):
            ReportPipeline(Settings(NICHE_RULES_PATH=str(tmp_path / "missing.yaml")))


class TestReportCli:
    """CLI 통합 테스트"""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def package_file(self, tmp_path, raw_package):
        path = tmp_path / "package.json"
        path.write_text(json.dumps(raw_package), encoding="utf-8")
        return path

    def test_analyze_json(self, runner, package_file):
        """--json 출력"""
        result = runner.invoke(app, [
            "analyze", str(package_file), "--json",
            "--now", "2024-01-10T12:00:00Z", "--timezone", "UTC",
        ])

        assert result.exit_code == 0
        assert '"niche": "fitness"' in result.output

    def test_analyze_tables(self, runner, package_file):
        """rich 테이블 출력"""
        result = runner.invoke(app, ["analyze", str(package_file), "--now", "2024-01-10T12:00:00Z"])

        assert result.exit_code == 0
        assert "Achievements" in result.output

    def test_missing_file(self, runner, tmp_path):
        """파일 없음 -> exit 1"""
        result = runner.invoke(app, ["analyze", str(tmp_path / "nope.json")])

        assert result.exit_code == 1

    def test_invalid_json(self, runner, tmp_path):
        """잘못된 JSON -> exit 1"""
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        assert runner.invoke(app, ["analyze", str(path)]).exit_code == 1

    def test_rules_command(self, runner, tmp_path):
        """규칙 파일 검증"""
        path = tmp_path / "rules.yaml"
        path.write_text("gaming: [stream]\n", encoding="utf-8")

        result = runner.invoke(app, ["rules", str(path)])

        assert result.exit_code == 0
        assert "1 rules loaded" in result.output

    def test_rules_directory(self, runner, tmp_path):
        """디렉터리 -> exit 1 (traceback 없음)"""
        result = runner.invoke(app, ["rules", str(tmp_path)])

        assert result.exit_code == 1
        assert not isinstance(result.exception, IsADirectoryError)

    def test_analyze_directory(self, runner, tmp_path):
        """패키지 경로가 디렉터리 -> exit 1"""
        assert runner.invoke(app, ["analyze", str(tmp_path)]).exit_code == 1

    def test_version(self, runner):
        """버전 출력"""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert settings.APP_VERSION in result.output
