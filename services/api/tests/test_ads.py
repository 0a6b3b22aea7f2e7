from datetime import datetime, timedelta, timezone

from recipehub.models import AdSlot

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _ad(placement="sidebar", minutes=0, is_active=True):
    return AdSlot(
        placement=placement,
        image_url=f"https://cdn.example.com/{placement}-{minutes}.png",
        target_url="https://shop.example.com",
        is_active=is_active,
        created_at=NOW + timedelta(minutes=minutes),
    )


def test_list_requires_placement(client):
    assert client.get("/api/ads").status_code == 400
    assert client.get("/api/ads", params={"placement": "  "}).status_code == 400


def test_list_active_newest_first(client, db_session):
    old, new = _ad(minutes=1), _ad(minutes=5)
    db_session.add_all([old, new, _ad(minutes=9, is_active=False), _ad("footer", minutes=3)])
    db_session.commit()

    ads = client.get("/api/ads", params={"placement": "sidebar"}).json()["ads"]
    assert [a["id"] for a in ads] == [new.id, old.id]
    assert set(ads[0]) == {"id", "placement", "image_url", "target_url"}


def test_list_is_capped_at_ten(client, db_session):
    db_session.add_all([_ad(minutes=i) for i in range(12)])
    db_session.commit()
    assert len(client.get("/api/ads", params={"placement": "sidebar"}).json()["ads"]) == 10


def test_admin_ad_lifecycle(client, auth_headers):
    response = client.post("/api/admin/ads", headers=auth_headers, json={
        "placement": "sidebar",
        "image_url": "https://cdn.example.com/a.png",
        "target_url": "https://shop.example.com",
    })
    assert response.status_code == 201
    ad_id = response.json()["id"]
    assert [a["id"] for a in client.get("/api/ads", params={"placement": "sidebar"}).json()["ads"]] == [ad_id]

    assert client.put(f"/api/admin/ads/{ad_id}", headers=auth_headers, json={"is_active": False}).status_code == 204
    assert client.get("/api/ads", params={"placement": "sidebar"}).json()["ads"] == []

    assert client.delete(f"/api/admin/ads/{ad_id}", headers=auth_headers).status_code == 204
    assert client.delete(f"/api/admin/ads/{ad_id}", headers=auth_headers).status_code == 404
    assert client.put(f"/api/admin/ads/{ad_id}", headers=auth_headers, json={}).status_code == 404


def test_admin_ad_validation(client, auth_headers):
    response = client.post("/api/admin/ads", headers=auth_headers, json={
        "placement": "sidebar", "image_url": "", "target_url": "https://shop.example.com",
    })
    assert response.status_code == 400
