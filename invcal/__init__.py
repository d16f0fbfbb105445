# invcal/__init__.py

"""
재고/캘린더 관리 백엔드(invcal)의 메인 패키지입니다.

FastAPI 애플리케이션의 진입점 (main.py)과
공통 설정, 데이터베이스 연결, 예외 정의를 담는 core 서브패키지,
그리고 각 비즈니스 도메인(inv: 품목/재고 원장, cal: 캘린더 일정)을 담는
domains 서브패키지로 구성됩니다.
"""

APP_NAME = "InvCal FastAPI API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Inventory transaction ledger and calendar backend."
__all__ = []
