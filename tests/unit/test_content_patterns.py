"""
Unit Tests for Content Pattern Analyzer
콘텐츠 패턴 발견 테스트

Run: pytest tests/unit/test_content_patterns.py -v
"""

import pytest

from socialsage.models.analysis import PatternType
from socialsage.services.analysis.content_patterns import ContentPatternAnalyzer, _hour_label


@pytest.fixture
def analyzer():
    return ContentPatternAnalyzer()


def pattern_ids(patterns):
    return [p.id for p in patterns]


class TestContentPatterns:
    """ContentPatternAnalyzer 테스트"""

    def test_empty(self, analyzer):
        """빈 입력 -> 빈 목록"""
        assert analyzer.analyze([]) == []

    def test_format_pattern(self, analyzer, make_post):
        """최고 성과 형식 (3개 이상)"""
        posts = (
            [make_post(media_type='VIDEO', like_count=300) for _ in range(3)]
            + [make_post(media_type='IMAGE', like_count=100) for _ in range(3)]
        )
        patterns = {p.id: p for p in analyzer.analyze(posts)}

        assert 'visual_video' in patterns
        assert patterns['visual_video'].pattern_type == PatternType.VISUAL
        assert patterns['visual_video'].frequency == pytest.approx(0.5)
        assert patterns['visual_video'].performance_impact == pytest.approx(1.5)

    def test_format_needs_enough_posts(self, analyzer, make_post):
        """최고 형식 게시물이 3개 미만이면 없음"""
        posts = (
            [make_post(media_type='VIDEO', like_count=300) for _ in range(2)]
            + [make_post(media_type='IMAGE', like_count=100) for _ in range(5)]
        )

        assert 'visual_video' not in pattern_ids(analyzer.analyze(posts))
        assert 'visual_image' not in pattern_ids(analyzer.analyze(posts))

    def test_question_pattern(self, analyzer, make_post):
        """질문형 캡션 댓글 효과"""
        posts = [
            make_post(caption="What do you think?", comments_count=20),
            make_post(caption="Which one?", comments_count=20),
            make_post(caption="Sunset", comments_count=5),
            make_post(caption="Coffee", comments_count=5),
        ]
        patterns = {p.id: p for p in analyzer.analyze(posts)}

        assert patterns['textual_questions'].performance_impact == pytest.approx(300.0)
        assert patterns['textual_questions'].examples == [posts[0].id, posts[1].id]

    def test_question_pattern_below_ratio(self, analyzer, make_post):
        """댓글 증가가 1.3배 이하면 없음"""
        posts = [
            make_post(caption="Thoughts?", comments_count=6),
            make_post(caption="Sunset", comments_count=5),
        ]

        assert 'textual_questions' not in pattern_ids(analyzer.analyze(posts))

    def test_hashtag_pattern(self, analyzer, make_post):
        """해시태그 전략 (3개 이상 게시물)"""
        posts = [make_post(caption="Run #Fitness #morning") for _ in range(3)]
        patterns = {p.id: p for p in analyzer.analyze(posts)}

        hashtags = patterns['textual_hashtags']
        assert hashtags.description == "You use an average of 2.0 hashtags per post"
        assert hashtags.examples == ['#fitness', '#morning']
        assert hashtags.recommendation.startswith("Increase hashtag usage")

    def test_caption_length_pattern(self, analyzer, make_post):
        """캡션 길이 최적 구간"""
        long_caption = "word " * 80
        posts = (
            [make_post(caption="Short and sweet", like_count=500) for _ in range(3)]
            + [make_post(caption=long_caption, like_count=50) for _ in range(3)]
        )

        assert 'textual_length_short' in pattern_ids(analyzer.analyze(posts))

    def test_temporal_patterns(self, analyzer, make_post):
        """요일 / 시간대 패턴 (7개 이상)"""
        posts = [
            make_post(timestamp="2024-01-01T19:00:00Z", like_count=400),
            make_post(timestamp="2024-01-08T19:00:00Z", like_count=400),
            make_post(timestamp="2024-01-03T09:00:00Z", like_count=50),
            make_post(timestamp="2024-01-10T09:00:00Z", like_count=50),
            make_post(timestamp="2024-01-05T12:00:00Z", like_count=80),
            make_post(timestamp="2024-01-12T12:00:00Z", like_count=80),
            make_post(timestamp="2024-01-06T15:00:00Z", like_count=60),
        ]
        patterns = {p.id: p for p in analyzer.analyze(posts)}

        assert patterns['temporal_day_monday'].performance_impact == pytest.approx(400.0)
        assert patterns['temporal_hour_19'].name == "Golden Hour: 7:00 PM"

    def test_temporal_needs_seven_posts(self, analyzer, make_post):
        """게시물 7개 미만이면 시간 패턴 없음"""
        posts = [make_post(timestamp="2024-01-01T19:00:00Z") for _ in range(6)]
        ids = pattern_ids(analyzer.analyze(posts))

        assert not any(i.startswith('temporal_') for i in ids)

    def test_discussion_pattern(self, analyzer, make_post):
        """좋아요 대비 댓글이 많은 게시물"""
        posts = (
            [make_post(like_count=100, comments_count=50) for _ in range(3)]
            + [make_post(like_count=100, comments_count=2) for _ in range(3)]
        )
        patterns = {p.id: p for p in analyzer.analyze(posts)}

        assert patterns['engagement_discussion'].performance_impact == pytest.approx(150.0)

    def test_saves_pattern(self, analyzer, make_post):
        """저장 많은 콘텐츠 (4개 이상)"""
        posts = [make_post(saved=10 * (i + 1)) for i in range(4)]
        patterns = {p.id: p for p in analyzer.analyze(posts)}

        assert patterns['engagement_saves'].performance_impact == pytest.approx(25.0)

    def test_sorted_and_deterministic(self, analyzer, package):
        """impact 내림차순, 같은 입력 -> 같은 결과"""
        first = analyzer.analyze(package.media)
        second = analyzer.analyze(package.media)
        impacts = [p.performance_impact for p in first]

        assert first == second
        assert impacts == sorted(impacts, reverse=True)


class TestHourLabel:
    """시간 표기 테스트"""

    @pytest.mark.parametrize("hour,label", [
        (0, "12:00 AM"),
        (9, "9:00 AM"),
        (12, "12:00 PM"),
        (19, "7:00 PM"),
    ])
    def test_hour_label(self, hour, label):
        assert _hour_label(hour) == label
