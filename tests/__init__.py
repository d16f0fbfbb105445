# tests/__init__.py

"""
invcal FastAPI 애플리케이션의 테스트 스위트 패키지입니다.

- `conftest.py`: 테스트 DB(기본: 임시 SQLite 파일), 세션, AsyncClient, 품목 픽스처.
- `test_main.py`: 루트/헬스 체크 엔드포인트와 ARQ 워커 설정.
- `test_core.py`: 공용 날짜 타입과 DB 헬스 체크 헬퍼.
- `domains/`: 도메인별(inv, cal) 통합 테스트.
"""

__title__ = "InvCal API Tests"
__all__ = []
