# tests/domains/__init__.py

"""
도메인별 API 통합 테스트 패키지입니다.

- `test_usr_n.py`: Google 로그인, 세션, 사용자 역할
- `test_loc_n.py`: 산지 계층
- `test_beer_n.py`: 맥주 카탈로그
- `test_wine_n.py`: 와인 카탈로그
"""

__all__ = []
