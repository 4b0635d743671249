# tapcellar/__init__.py

"""
TapCellar FastAPI 애플리케이션의 메인 패키지입니다.

맥주(양조장, 스타일, BJCP 분류, 메뉴 카테고리)와 와인(와이너리, 품종, 계층형 산지)
카탈로그를 관리하고 조회하는 API를 제공합니다.

- `core`: 설정, 데이터베이스 수명 주기, 보안(세션 토큰, Google 인증), 공통 CRUD.
- `domains`: 비즈니스 도메인별 모델/스키마/CRUD/라우터 (usr, loc, beer, wine).
- `services`: 여러 도메인이 공유하는 재고(가용성) 필터 조립 로직.
"""

APP_NAME = "TapCellar API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Beer & wine catalog API backend."
__all__ = []
