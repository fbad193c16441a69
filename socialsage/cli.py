"""
Report CLI
JSON 데이터 패키지로 인사이트 리포트 생성

Usage:
    python scripts/analyze_report.py analyze data/package.json
    python scripts/analyze_report.py analyze data/package.json --previous data/last_week.json --json
    python scripts/analyze_report.py rules configs/classifier/niches.yaml
"""

from pathlib import Path
from typing import Any, Optional
import json

import typer
from rich.console import Console
from rich.table import Table

from socialsage.core.config import configure_logging, settings
from socialsage.core.errors import InputError, SocialSageError
from socialsage.core.pipeline import ReportPipeline
from socialsage.generators.weekly_performance import build_tip_selector
from socialsage.models.instagram import parse_timestamp
from socialsage.models.report import InsightReport
from socialsage.services.analysis.classifier import load_keyword_rules

app = typer.Typer(help=f"{settings.APP_NAME} report tools")
console = Console()


def _load_json(path: Path) -> Any:
    """JSON 파일 로드 (실패 시 InputError)"""
    if not path.is_file():
        raise InputError(f"File not found: {path}", details={"path": str(path)})
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise InputError(f"Invalid JSON in {path}: {e}", details={"path": str(path)}) from e
    except OSError as e:
        raise InputError(f"Cannot read {path}: {e}", details={"path": str(path)}) from e


@app.command()
def analyze(
    package_path: Path = typer.Argument(..., help="Raw Instagram data package (JSON)"),
    previous: Optional[Path] = typer.Option(None, "--previous", help="Previous period package (JSON)"),
    as_json: bool = typer.Option(False, "--json", help="Print the full report as JSON"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time (ISO 8601)"),
    timezone: Optional[str] = typer.Option(None, "--timezone", help="IANA timezone name"),
    tips: Optional[str] = typer.Option(None, "--tips", help="Tip selection: rotate or random"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for random tip selection"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
):
    """
    리포트 생성

    Args:
        package_path: 데이터 패키지 경로
        previous: 이전 기간 패키지 경로
        as_json: JSON 출력
    """
    configure_logging(log_level or ("WARNING" if as_json else settings.LOG_LEVEL))

    try:
        reference = None
        if now:
            reference = parse_timestamp(now)
            if reference is None:
                raise InputError(f"Invalid --now value: {now}")

        overrides = {}
        if timezone:
            overrides["DEFAULT_TIMEZONE"] = timezone
        run_settings = settings.model_copy(update=overrides) if overrides else settings

        selector = build_tip_selector(tips, seed) if tips else None
        pipeline = ReportPipeline(run_settings, tip_selector=selector)

        raw = _load_json(package_path)
        prior = _load_json(previous) if previous else None
        report = pipeline.run(raw, previous=prior, now=reference)

    except SocialSageError as e:
        console.print(f"[red]❌ {e.error_type.value} error: {e.message}[/red]")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
        return

    _print_report(report)


@app.command()
def rules(
    rules_path: Path = typer.Argument(..., help="Keyword rules file (YAML)"),
):
    """
    키워드 규칙 파일 검증
    """
    try:
        loaded = load_keyword_rules(rules_path)
    except SocialSageError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"Keyword Rules ({rules_path.name})")
    table.add_column("Label", style="cyan")
    table.add_column("Keywords", style="white")

    for rule in loaded:
        table.add_row(rule.label, ", ".join(rule.keywords))

    console.print(table)
    console.print(f"[green]✅ {len(loaded)} rules loaded[/green]")


@app.command()
def version():
    """버전 출력"""
    console.print(f"{settings.APP_NAME} v{settings.APP_VERSION}")


# ============================================================
# Rendering
# ============================================================

def _print_report(report: InsightReport):
    """리포트 출력 (rich 테이블)"""
    profile = report.profile
    console.print(
        f"\n📊 [bold cyan]@{profile.username or 'unknown'}[/bold cyan] "
        f"- {profile.followers_count:,} followers, niche: [bold]{report.niche}[/bold]\n"
    )

    overview = Table(title="Overview")
    overview.add_column("Metric", style="cyan")
    overview.add_column("Value", style="bold")
    overview.add_row("Engagement rate", f"{report.engagement.engagement_rate:.2f}%")
    overview.add_row("Avg engagement", f"{report.engagement.avg_engagement:.1f}")
    overview.add_row("Posting frequency", report.posting_patterns.frequency.value)
    overview.add_row(
        "Optimal slot",
        f"{report.optimal_time.day} {report.optimal_time.hour:02d}:00"
        + (" (default)" if report.optimal_time.is_default else ""),
    )
    overview.add_row("Caption sentiment", f"{report.sentiment.overall_sentiment} ({report.sentiment.sentiment_trend})")
    overview.add_row("Achievement score", str(report.user_stats.achievement_score))
    console.print(overview)

    achievements = Table(title="Achievements")
    achievements.add_column("Badge")
    achievements.add_column("Title", style="cyan")
    achievements.add_column("Tier")
    achievements.add_column("Status", style="bold")
    for achievement in report.achievements:
        status = "✅ Unlocked" if achievement.unlocked else "🔒 Locked"
        if not achievement.unlocked and achievement.max_progress:
            status += f" ({achievement.progress or 0:g}/{achievement.max_progress:g})"
        achievements.add_row(achievement.icon, achievement.title, achievement.difficulty.value, status)
    console.print(achievements)

    highlights = Table(title="Highlights")
    highlights.add_column("Kind", style="cyan")
    highlights.add_column("Title", style="bold")
    highlights.add_column("Details")
    for win in report.weekly_wins:
        highlights.add_row("win", win.title, win.description)
    for insight in report.smart_insights:
        highlights.add_row("insight", insight.title, insight.description)
    for notification in report.notifications:
        highlights.add_row("notification", notification.title, notification.body)
    for recommendation in report.content.recommendations:
        highlights.add_row("recommendation", "", recommendation)
    console.print(highlights)

    trends = Table(title="Trends & Forecasts")
    trends.add_column("Kind", style="cyan")
    trends.add_column("Summary", style="bold")
    trends.add_column("Details")
    for prediction in report.trends.predictions:
        trends.add_row(prediction.trend_type.value, prediction.prediction, f"confidence {prediction.confidence:.0%}")
    for recommendation in report.trends.recommendations:
        trends.add_row("recommendation", recommendation.title, recommendation.description)
    for forecast in report.trends.forecasts:
        interval = forecast.confidence_interval
        trends.add_row(
            f"forecast: {forecast.metric}",
            f"{forecast.current_average:.1f} -> {forecast.predicted_value:.1f}",
            f"{interval.min:.1f} ~ {interval.max:.1f} ({forecast.timeframe})",
        )
    console.print(trends)

    weekly = report.weekly_performance
    performance = Table(title="Weekly Performance")
    performance.add_column("Metric", style="cyan")
    performance.add_column("Current", justify="right")
    performance.add_column("Previous", justify="right")
    performance.add_column("Change", justify="right")
    for name in ("likes", "comments", "posts", "shares", "impressions"):
        change = getattr(weekly.changes, name)
        performance.add_row(
            name,
            f"{getattr(weekly.current_week, name):,}",
            f"{getattr(weekly.previous_week, name):,}",
            f"{change.value:+,} ({change.percentage:+.1f}%)",
        )
    console.print(performance)

    console.print(f"\n💡 [bold]{weekly.smart_tip.title}[/bold]: {weekly.smart_tip.description}\n")


if __name__ == "__main__":
    app()
