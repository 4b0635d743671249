# tapcellar/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

- `config.py`: 애플리케이션 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 엔진 초기화/종료 수명 주기와 세션 의존성.
- `crud_base.py`: 모든 도메인이 공유하는 비동기 CRUD 기본 클래스.
- `google_auth.py`: Google ID 토큰 검증 (외부 인증 제공자 경계).
- `security.py`: 세션 토큰 발급/검증과 역할 기반 권한 검사.
- `dependencies.py`: 라우터에서 사용하는 공통 의존성.
"""

__title__ = "TapCellar Core"
__all__ = []
