# invcal/domains/__init__.py

"""
비즈니스 도메인 패키지 모음입니다.

- `inv`: 품목과 재고 원장 (Transaction Engine 포함)
- `cal`: 캘린더 일정 (Event)
"""
