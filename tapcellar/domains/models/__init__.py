# tapcellar/domains/models/__init__.py

"""
이 파일은 모든 도메인의 SQLModel 모델들을 한 곳에서 중앙 관리하여,
다른 모듈에서 쉽게 임포트할 수 있도록 하는 역할을 합니다.
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다.
"""

# usr (User)
from tapcellar.domains.usr.models import User, UserRole

# loc (Location)
from tapcellar.domains.loc.models import Location, LocationKind

# beer (BJCPCategory, MenuCategory, Style, Brewery, Beer, MenuCategoryBeer)
from tapcellar.domains.beer.models import (
    BJCPCategory, MenuCategory, Style, Brewery, Beer, BeerStatus, MenuCategoryBeer
)

# wine (Winery, Varietal, Wine, WineVarietal)
from tapcellar.domains.wine.models import Winery, Varietal, Wine, WineVarietal

__all__ = [
    "User", "UserRole",
    "Location", "LocationKind",
    "BJCPCategory", "MenuCategory", "Style", "Brewery", "Beer", "BeerStatus", "MenuCategoryBeer",
    "Winery", "Varietal", "Wine", "WineVarietal",
]
