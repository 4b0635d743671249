# tapcellar/domains/loc/__init__.py

"""
FastAPI 애플리케이션의 'loc' 도메인 패키지입니다.

와인 산지를 국가(country) -> 지역(area) -> 포도밭(vineyard) 계층 트리로 관리합니다.

주요 서브모듈:
- `models.py`: locations 테이블에 매핑되는 SQLModel 정의.
- `hierarchy.py`: 트리 스냅샷(LocationTree)과 경로/하위 집합 계산.
- `schemas.py`: 요청 및 응답 유효성 검사 모델.
- `crud.py`: 계층 규칙을 검사하는 비동기 CRUD 로직.
- `routers.py`: API 엔드포인트 정의.
"""

__title__ = "TapCellar Location Domain"
__description__ = "Hierarchical wine regions (country, area, vineyard)."
__version__ = "0.1.0"
__all__ = []
