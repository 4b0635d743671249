# tests/__init__.py

"""
TapCellar API 테스트 스위트 패키지입니다.

- `conftest.py`: 테스트용 인메모리 DB, 역할별 인증 클라이언트 등 공용 fixture.
- `domains/`: 도메인별(usr, loc, beer, wine) API 통합 테스트.
- 루트의 `test_*.py`: 앱 엔드포인트, 산지 트리, 재고 필터, Google 토큰 검증, 관리 스크립트 테스트.
"""

__title__ = "TapCellar API Tests"
__all__ = []
