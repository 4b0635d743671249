# tapcellar/services/__init__.py

"""
여러 도메인이 공유하는 서비스 로직 패키지입니다.

- `catalog_filter.py`: 맥주/와인 재고 필터와 facet 계산에 쓰이는 조건 조립기.
"""

__all__ = []
