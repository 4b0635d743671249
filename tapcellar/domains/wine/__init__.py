# tapcellar/domains/wine/__init__.py

"""
FastAPI 애플리케이션의 'wine' 도메인 패키지입니다.

와이너리, 포도 품종과 와인 재고(냉장/셀러 수량)를 관리합니다.
와인 산지는 'loc' 도메인의 계층 트리를 참조합니다.

주요 서브모듈:
- `models.py`: wine 관련 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 모델 (WineDetail, WineFacets 포함).
- `crud.py`: 비동기 CRUD, 품종 연결 교체, 산지 하위 확장 재고 필터.
- `routers.py`: API 엔드포인트 정의.
"""

__title__ = "TapCellar Wine Domain"
__description__ = "Wineries, varietals and wines."
__version__ = "0.1.0"
__all__ = []
