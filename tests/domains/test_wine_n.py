# tests/domains/test_wine_n.py

"""
'wine' 도메인 (와인 카탈로그) 관련 API 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.

- 와이너리, 품종, 와인 CRUD (품종 연결 교체 포함)
- 재고 있는 와인 조회: 산지(하위 산지 포함), 품종, 와이너리 필터
- facet: 산지 선택지에 상위 산지 포함
- 와이너리 삭제 시 와인 연쇄 삭제
"""

import pytest
from httpx import AsyncClient

from tapcellar.domains.loc import models as loc_models
from tapcellar.domains.wine import models as wine_models

BASE_URL = "/api/v1/wine"


async def _make_cellar(persist):
    """
    France > Bordeaux > Pauillac, France > Burgundy, Italy
    - Latour (Pauillac, Cabernet+Merlot, cellared 2)
    - Palmer (Bordeaux, Merlot, refrigerated 1)
    - Romanee (Burgundy, Pinot, 재고 없음)
    - Barolo (Italy, Nebbiolo, cellared 6)
    """
    france, italy = await persist(
        loc_models.Location(name="France", kind=loc_models.LocationKind.COUNTRY),
        loc_models.Location(name="Italy", kind=loc_models.LocationKind.COUNTRY),
    )
    bordeaux, burgundy = await persist(
        loc_models.Location(name="Bordeaux", kind=loc_models.LocationKind.AREA, parent_id=france.id),
        loc_models.Location(name="Burgundy", kind=loc_models.LocationKind.AREA, parent_id=france.id),
    )
    pauillac = await persist(
        loc_models.Location(name="Pauillac", kind=loc_models.LocationKind.VINEYARD, parent_id=bordeaux.id)
    )
    chateau, domaine, cantina = await persist(
        wine_models.Winery(name="Chateau", location_id=bordeaux.id),
        wine_models.Winery(name="Domaine", location="Côte de Nuits"),
        wine_models.Winery(name="Cantina"),
    )
    cabernet, merlot, pinot, nebbiolo = await persist(
        wine_models.Varietal(name="Cabernet Sauvignon"),
        wine_models.Varietal(name="Merlot"),
        wine_models.Varietal(name="Pinot Noir"),
        wine_models.Varietal(name="Nebbiolo"),
    )
    latour, palmer, romanee, barolo = await persist(
        wine_models.Wine(label="Latour", winery_id=chateau.id, location_id=pauillac.id, vintage=2010, cellared=2),
        wine_models.Wine(label="Palmer", winery_id=chateau.id, location_id=bordeaux.id, refrigerated=1),
        wine_models.Wine(label="Romanee", winery_id=domaine.id, location_id=burgundy.id),
        wine_models.Wine(label="Barolo", winery_id=cantina.id, location_id=italy.id, cellared=6),
    )
    await persist(
        wine_models.WineVarietal(wine_id=latour.id, varietal_id=cabernet.id),
        wine_models.WineVarietal(wine_id=latour.id, varietal_id=merlot.id),
        wine_models.WineVarietal(wine_id=palmer.id, varietal_id=merlot.id),
        wine_models.WineVarietal(wine_id=romanee.id, varietal_id=pinot.id),
        wine_models.WineVarietal(wine_id=barolo.id, varietal_id=nebbiolo.id),
    )
    return {
        "france": france, "italy": italy, "bordeaux": bordeaux, "burgundy": burgundy, "pauillac": pauillac,
        "chateau": chateau, "domaine": domaine, "cantina": cantina,
        "cabernet": cabernet, "merlot": merlot, "pinot": pinot, "nebbiolo": nebbiolo,
        "latour": latour, "palmer": palmer, "romanee": romanee, "barolo": barolo,
    }


# --- CRUD ---

@pytest.mark.asyncio
async def test_create_wine_with_varietals(curator_client: AsyncClient, persist):
    """
    와인 생성 시 품종이 연결되고, 응답에 와이너리 이름/산지 경로/품종이 포함되는지 테스트합니다.
    """
    print("\n--- Running test_create_wine_with_varietals ---")
    france = await persist(loc_models.Location(name="France", kind=loc_models.LocationKind.COUNTRY))
    rhone = await persist(loc_models.Location(name="Rhône", kind=loc_models.LocationKind.AREA, parent_id=france.id))

    response = await curator_client.post(f"{BASE_URL}/wineries/", json={"name": "Guigal", "location_id": rhone.id})
    assert response.status_code == 201
    winery_id = response.json()["id"]

    syrah = (await curator_client.post(f"{BASE_URL}/varietals/", json={"name": "Syrah"})).json()
    viognier = (await curator_client.post(f"{BASE_URL}/varietals/", json={"name": "Viognier"})).json()

    response = await curator_client.post(
        f"{BASE_URL}/wines/",
        json={
            "label": "La Landonne",
            "winery_id": winery_id,
            "vintage": 2015,
            "location_id": rhone.id,
            "cellared": 4,
            "varietal_ids": [viognier["id"], syrah["id"], syrah["id"]],
        },
    )
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 201
    wine = response.json()
    assert wine["winery_name"] == "Guigal"
    assert wine["location_name"] == "Rhône"
    assert wine["location_path"] == "France → Rhône"
    assert wine["varietal_names"] == ["Syrah", "Viognier"]
    assert [item["id"] for item in wine["varietals"]] == [syrah["id"], viognier["id"]]
    assert wine["refrigerated"] == 0
    print("test_create_wine_with_varietals passed.")


@pytest.mark.asyncio
async def test_create_wine_invalid_references(curator_client: AsyncClient, persist):
    winery = await persist(wine_models.Winery(name="Solo"))

    response = await curator_client.post(f"{BASE_URL}/wines/", json={"label": "X", "winery_id": 9999})
    assert response.status_code == 400
    assert response.json()["detail"] == "Winery not found for the given ID"

    response = await curator_client.post(
        f"{BASE_URL}/wines/", json={"label": "X", "winery_id": winery.id, "location_id": 9999}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Location not found for the given ID"

    response = await curator_client.post(
        f"{BASE_URL}/wines/", json={"label": "X", "winery_id": winery.id, "varietal_ids": [9999]}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Varietal not found for the given ID"

    response = await curator_client.post(
        f"{BASE_URL}/wines/", json={"label": "X", "winery_id": winery.id, "cellared": -1}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_varietal_duplicate_name(curator_client: AsyncClient, persist):
    await persist(wine_models.Varietal(name="Merlot"))
    response = await curator_client.post(f"{BASE_URL}/varietals/", json={"name": "Merlot"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Varietal with this name already exists"


@pytest.mark.asyncio
async def test_wine_permission_denied(authorized_client: AsyncClient, client: AsyncClient):
    response = await authorized_client.post(f"{BASE_URL}/varietals/", json={"name": "Gamay"})
    assert response.status_code == 403

    response = await client.delete(f"{BASE_URL}/wines/1")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_wine_replaces_varietals(curator_client: AsyncClient, persist):
    """
    varietal_ids를 보내면 품종 연결이 교체되고, 생략하면 유지되는지 테스트합니다.
    """
    cellar = await _make_cellar(persist)
    latour_id = cellar["latour"].id

    response = await curator_client.put(f"{BASE_URL}/wines/{latour_id}", json={"cellared": 0, "refrigerated": 3})
    assert response.status_code == 200
    wine = response.json()
    assert wine["cellared"] == 0
    assert wine["refrigerated"] == 3
    assert wine["varietal_names"] == ["Cabernet Sauvignon", "Merlot"]

    response = await curator_client.put(
        f"{BASE_URL}/wines/{latour_id}", json={"varietal_ids": [cellar["pinot"].id]}
    )
    assert response.json()["varietal_names"] == ["Pinot Noir"]

    response = await curator_client.put(f"{BASE_URL}/wines/{latour_id}", json={"varietal_ids": []})
    assert response.json()["varietals"] == []

    response = await curator_client.put(f"{BASE_URL}/wines/{latour_id}", json={"description": "Earthy"})
    assert response.json()["description"] == "Earthy"
    response = await curator_client.put(f"{BASE_URL}/wines/{latour_id}", json={"description": None})
    assert response.json()["description"] is None

    response = await curator_client.put(f"{BASE_URL}/wines/{latour_id}", json={"label": None})
    assert response.status_code == 400

    response = await curator_client.put(f"{BASE_URL}/wines/9999", json={"label": "Ghost"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Wine not found"


@pytest.mark.asyncio
async def test_update_wine_varietals_exact_replacement(curator_client: AsyncClient, persist):
    """
    품종 [1, 2]를 [2, 3]으로 바꾸면 연결은 정확히 {2, 3}이어야 합니다.
    """
    winery = await persist(wine_models.Winery(name="Blend House"))
    first, second, third = await persist(
        wine_models.Varietal(name="Grenache"),
        wine_models.Varietal(name="Syrah"),
        wine_models.Varietal(name="Mourvedre"),
    )

    response = await curator_client.post(
        f"{BASE_URL}/wines/",
        json={"label": "GSM", "winery_id": winery.id, "varietal_ids": [first.id, second.id]},
    )
    wine_id = response.json()["id"]
    assert {item["id"] for item in response.json()["varietals"]} == {first.id, second.id}

    response = await curator_client.put(
        f"{BASE_URL}/wines/{wine_id}", json={"varietal_ids": [second.id, third.id]}
    )
    assert response.status_code == 200
    assert {item["id"] for item in response.json()["varietals"]} == {second.id, third.id}


@pytest.mark.asyncio
async def test_read_wine_detail_without_location(client: AsyncClient, persist):
    winery = await persist(wine_models.Winery(name="Nomad"))
    wine = await persist(wine_models.Wine(label="Table Red", winery_id=winery.id, refrigerated=1))

    response = await client.get(f"{BASE_URL}/wines/{wine.id}")
    assert response.status_code == 200
    detail = response.json()
    assert detail["location_id"] is None
    assert detail["location_name"] is None
    assert detail["location_path"] is None
    assert detail["varietals"] == []

    response = await client.get(f"{BASE_URL}/wines/9999")
    assert response.status_code == 404


# --- 재고 조회 ---

@pytest.mark.asyncio
async def test_available_wines_in_stock_only(client: AsyncClient, persist):
    """
    냉장 또는 셀러 수량이 있는 와인만 라벨 순으로 반환되어야 합니다.
    """
    await _make_cellar(persist)

    response = await client.get(f"{BASE_URL}/wines/available")
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 200
    rows = response.json()
    assert [row["label"] for row in rows] == ["Barolo", "Latour", "Palmer"]

    latour = rows[1]
    assert latour["location_path"] == "France → Bordeaux → Pauillac"
    assert latour["winery_name"] == "Chateau"
    assert latour["varietal_names"] == ["Cabernet Sauvignon", "Merlot"]


@pytest.mark.asyncio
async def test_available_wines_location_includes_descendants(client: AsyncClient, persist):
    """
    산지 필터는 선택한 산지의 하위 산지에 속한 와인도 포함해야 합니다.
    """
    cellar = await _make_cellar(persist)

    response = await client.get(f"{BASE_URL}/wines/available", params={"location_ids": [cellar["france"].id]})
    assert [row["label"] for row in response.json()] == ["Latour", "Palmer"]

    response = await client.get(f"{BASE_URL}/wines/available", params={"location_ids": [cellar["pauillac"].id]})
    assert [row["label"] for row in response.json()] == ["Latour"]

    response = await client.get(
        f"{BASE_URL}/wines/available",
        params={"location_ids": [cellar["pauillac"].id, cellar["italy"].id]},
    )
    assert [row["label"] for row in response.json()] == ["Barolo", "Latour"]

    response = await client.get(f"{BASE_URL}/wines/available", params={"location_ids": [cellar["burgundy"].id]})
    assert response.json() == []


@pytest.mark.asyncio
async def test_available_wines_varietal_and_winery_filters(client: AsyncClient, persist):
    """
    품종은 하나라도 일치하면 포함(OR)되고, 서로 다른 필터는 AND로 결합되어야 합니다.
    """
    cellar = await _make_cellar(persist)

    response = await client.get(f"{BASE_URL}/wines/available", params={"varietal_ids": [cellar["merlot"].id]})
    assert [row["label"] for row in response.json()] == ["Latour", "Palmer"]

    response = await client.get(
        f"{BASE_URL}/wines/available",
        params={"varietal_ids": [cellar["cabernet"].id, cellar["nebbiolo"].id]},
    )
    assert [row["label"] for row in response.json()] == ["Barolo", "Latour"]

    response = await client.get(
        f"{BASE_URL}/wines/available",
        params={"varietal_ids": [cellar["merlot"].id], "location_ids": [cellar["pauillac"].id]},
    )
    assert [row["label"] for row in response.json()] == ["Latour"]

    response = await client.get(f"{BASE_URL}/wines/available", params={"winery_ids": [cellar["cantina"].id]})
    assert [row["label"] for row in response.json()] == ["Barolo"]


@pytest.mark.asyncio
async def test_available_wine_facets(client: AsyncClient, persist):
    """
    산지 선택지는 재고 와인의 산지와 그 상위 산지를 모두 포함해야 합니다.
    """
    cellar = await _make_cellar(persist)

    response = await client.get(f"{BASE_URL}/wines/available/facets")
    facets = response.json()
    print(f"Facets: {facets}")
    expected_locations = sorted([
        cellar["france"].id, cellar["italy"].id, cellar["bordeaux"].id, cellar["pauillac"].id,
    ])
    assert facets["location_ids"] == expected_locations
    assert cellar["burgundy"].id not in facets["location_ids"]
    assert facets["varietal_ids"] == sorted([cellar["cabernet"].id, cellar["merlot"].id, cellar["nebbiolo"].id])
    assert facets["winery_ids"] == sorted([cellar["chateau"].id, cellar["cantina"].id])

    # 품종 필터는 산지/와이너리 선택지를 좁히지만 품종 선택지 자체는 유지합니다.
    response = await client.get(
        f"{BASE_URL}/wines/available/facets", params={"varietal_ids": [cellar["nebbiolo"].id]}
    )
    facets = response.json()
    assert facets["location_ids"] == [cellar["italy"].id]
    assert facets["winery_ids"] == [cellar["cantina"].id]
    assert facets["varietal_ids"] == sorted([cellar["cabernet"].id, cellar["merlot"].id, cellar["nebbiolo"].id])


# --- 삭제 ---

@pytest.mark.asyncio
async def test_delete_winery_cascades_to_wines(curator_client: AsyncClient, client: AsyncClient, persist):
    cellar = await _make_cellar(persist)

    response = await curator_client.delete(f"{BASE_URL}/wineries/{cellar['chateau'].id}")
    assert response.status_code == 204

    response = await client.get(f"{BASE_URL}/wines/")
    assert [row["label"] for row in response.json()] == ["Barolo", "Romanee"]

    response = await client.get(f"{BASE_URL}/wines/{cellar['latour'].id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_varietal_removes_links(curator_client: AsyncClient, client: AsyncClient, persist):
    cellar = await _make_cellar(persist)

    response = await curator_client.delete(f"{BASE_URL}/varietals/{cellar['merlot'].id}")
    assert response.status_code == 204

    response = await client.get(f"{BASE_URL}/wines/{cellar['palmer'].id}")
    assert response.json()["varietals"] == []

    response = await client.get(f"{BASE_URL}/wines/available", params={"varietal_ids": [cellar["merlot"].id]})
    assert response.json() == []


# --- 저장소 장애 ---

@pytest.mark.asyncio
async def test_store_unavailable_wine_reads_are_empty(unavailable_store_client: AsyncClient):
    response = await unavailable_store_client.get(f"{BASE_URL}/wines/available")
    assert response.status_code == 200
    assert response.json() == []

    response = await unavailable_store_client.get(f"{BASE_URL}/wines/available/facets")
    assert response.json() == {"location_ids": [], "varietal_ids": [], "winery_ids": []}

    response = await unavailable_store_client.post(f"{BASE_URL}/varietals/", json={"name": "Offline"})
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_store_unavailable_wine_updates_fail(unavailable_store_client: AsyncClient):
    """
    저장소 장애 중의 수정 요청은 '없음'(404)으로 보이지 않고 503이어야 합니다.
    """
    for path, body in (
        ("wines/1", {"cellared": 1}),
        ("wineries/1", {"name": "Offline"}),
        ("varietals/1", {"name": "Offline"}),
    ):
        response = await unavailable_store_client.put(f"{BASE_URL}/{path}", json=body)
        print(f"PUT {path}: {response.json()}")
        assert response.status_code == 503
        assert response.json()["detail"] == "Database not available"
