"""
Social Sage Insight Core
Instagram 데이터 패키지 -> 분석 리포트
"""

__version__ = "1.0.0"
