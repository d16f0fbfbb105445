# invcal/domains/cal/__init__.py

"""
'cal' 도메인 패키지: 재고 원장과 별개인 캘린더 일정(Event)을 관리합니다.
"""

__title__ = "InvCal Calendar Domain"
__version__ = "0.1.0"
__all__ = []
