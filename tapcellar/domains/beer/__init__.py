# tapcellar/domains/beer/__init__.py

"""
FastAPI 애플리케이션의 'beer' 도메인 패키지입니다.

양조장, 맥주 스타일, BJCP 분류, 메뉴 카테고리와 맥주 재고를 관리합니다.

주요 서브모듈:
- `models.py`: beer 관련 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 모델 (BeerDetail, BeerFacets 포함).
- `crud.py`: 비동기 CRUD, 재고 필터, facet, 삭제 시 하위 데이터 정리.
- `routers.py`: API 엔드포인트 정의.
"""

__title__ = "TapCellar Beer Domain"
__description__ = "Breweries, styles, BJCP categories, menu categories and beers."
__version__ = "0.1.0"
__all__ = []
