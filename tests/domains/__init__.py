# tests/domains/__init__.py

"""
도메인별 테스트 패키지입니다.

- `test_inv_n.py`: 'inv' 도메인 (품목 및 재고 원장)
- `test_cal_n.py`: 'cal' 도메인 (캘린더 일정)
"""

__all__ = []
