# tapcellar/domains/usr/__init__.py

"""
FastAPI 애플리케이션의 'usr' 도메인 패키지입니다.

Google 계정으로 로그인한 사용자 정보와 역할(user, curator, admin)을 관리합니다.

주요 서브모듈:
- `models.py`: users 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청 및 응답 유효성 검사용 모델.
- `crud.py`: 로그인 시 사용자 upsert, 역할 변경.
- `routers.py`: 인증/사용자 관리 API 엔드포인트.
"""

__title__ = "TapCellar User Domain"
__description__ = "Google sign-in users and their roles."
__version__ = "0.1.0"
__all__ = []
