"""
MP Pricing Sandbox

샘플 카탈로그(catalog.yaml)와 pytest fixture 모음
"""

from pathlib import Path

SAMPLE_CATALOG_PATH = Path(__file__).parent / "catalog.yaml"
