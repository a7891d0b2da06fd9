"""
MP Pricing - Pytest Configuration

테스트에서 사용할 공통 fixture들을 정의합니다.
"""

import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Sandbox fixtures import
from sandbox.fixtures import (
    as_of,
    sample_catalog,
    calculator,
    pricing_service,
)

# Re-export all fixtures
__all__ = [
    "as_of",
    "sample_catalog",
    "calculator",
    "pricing_service",
]
