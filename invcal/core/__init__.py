# invcal/core/__init__.py

"""
애플리케이션 전반에서 사용되는 핵심 구성 요소 패키지입니다.

- `config.py`: 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 비동기 엔진, 세션 관리 (SQLModel + AsyncSQLAlchemy).
- `crud_base.py`: 공통 비동기 CRUD 기본 클래스.
- `dependencies.py`: FastAPI 의존성 함수.
- `exceptions.py`: 재고 원장 도메인 예외 (NotFound / Validation / Storage).
- `tasks.py`: ARQ 워커용 공통 태스크.
"""

__title__ = "InvCal Core"
__version__ = "0.1.0"
__all__ = []
