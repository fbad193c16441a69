#!/usr/bin/env python3
"""
Report Analysis Script
JSON 데이터 패키지로 인사이트 리포트 생성

Usage:
    python scripts/analyze_report.py analyze PACKAGE.json [--previous FILE] [--json]
"""

from socialsage.cli import app


if __name__ == "__main__":
    app()
