# tapcellar/domains/__init__.py

"""
비즈니스 도메인 패키지 모음입니다.

- `usr`: Google 로그인 사용자와 역할.
- `loc`: 국가 -> 지역 -> 포도밭 계층형 산지.
- `beer`: 양조장, 스타일, BJCP 분류, 메뉴 카테고리, 맥주.
- `wine`: 와이너리, 품종, 와인.
- `models`: 모든 테이블 모델을 한 곳에서 임포트 (metadata 등록용).
"""

__all__ = []
