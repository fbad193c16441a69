"""
Services 패키지
- analysis: 분류 / 패턴 / 참여 / 성장 / 감정 분석
- achievements: 업적 평가
"""
