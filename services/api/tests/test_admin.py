"""Tests for moderation and challenge management.

Tests cover:
- Approving a submitted recipe makes it listed and recommended
- Approval invalidates the cached recipe detail
- Challenge create/update/delete and recipe linking
"""

from datetime import date

from sqlalchemy import select

from recipehub.models import Challenge, ChallengeRecipe
from recipehub.services.recipes import set_recipe_approval

PANCAKES = {
    "title": "Vegan pancakes",
    "servings": 2,
    "diet": ["vegan"],
    "ingredients": [{"name": "Flour", "quantity": 200, "unit": "g"}],
}


def _recommended_titles(client, headers):
    data = client.get("/api/recommendations", headers=headers).json()
    return {r["title"] for r in data["recipes"]}


def test_submit_approve_then_recommended(client, auth_headers):
    recipe_id = client.post("/api/recipes", headers=auth_headers, json=PANCAKES).json()["id"]
    assert "Vegan pancakes" not in _recommended_titles(client, auth_headers)

    response = client.put(
        f"/api/admin/recipes/{recipe_id}/approval", headers=auth_headers, json={"is_approved": True}
    )
    assert response.status_code == 204

    assert "Vegan pancakes" in _recommended_titles(client, auth_headers)
    listed = client.get("/api/recipes").json()["recipes"]
    assert [r["id"] for r in listed] == [recipe_id]


def test_approval_defaults_to_true_and_can_revoke(client, auth_headers, make_recipe):
    recipe = make_recipe(title="Pending", is_approved=False)
    assert client.put(f"/api/admin/recipes/{recipe.id}/approval", headers=auth_headers).status_code == 204
    assert len(client.get("/api/recipes").json()["recipes"]) == 1

    client.put(f"/api/admin/recipes/{recipe.id}/approval", headers=auth_headers, json={"is_approved": False})
    assert client.get("/api/recipes").json()["recipes"] == []


def test_approval_refreshes_cached_detail(client, auth_headers, make_recipe):
    recipe = make_recipe(title="Pending", is_approved=False)
    assert client.get(f"/api/recipes/{recipe.id}").json()["is_approved"] is False

    client.put(f"/api/admin/recipes/{recipe.id}/approval", headers=auth_headers)
    assert client.get(f"/api/recipes/{recipe.id}").json()["is_approved"] is True


def test_approval_unknown_recipe(client, auth_headers, db_session):
    response = client.put("/api/admin/recipes/missing/approval", headers=auth_headers)
    assert response.status_code == 404
    assert set_recipe_approval(db_session, "missing") is False


def test_admin_requires_user(client):
    assert client.post("/api/admin/challenges", json={"title": "Soup week"}).status_code == 401


def test_create_challenge(client, auth_headers, db_session):
    response = client.post("/api/admin/challenges", headers=auth_headers, json={
        "title": "  Soup week ",
        "start_date": "2024-01-01",
        "end_date": "2024-01-07",
    })
    assert response.status_code == 201
    challenge = db_session.get(Challenge, response.json()["id"])
    assert challenge.title == "Soup week"
    assert challenge.description == ""
    assert challenge.start_date == date(2024, 1, 1)


def test_create_challenge_short_title(client, auth_headers):
    response = client.post("/api/admin/challenges", headers=auth_headers, json={"title": " ab "})
    assert response.status_code == 400


def test_update_challenge_is_partial(client, auth_headers, db_session):
    challenge = Challenge(title="Soup week", description="Seven soups", start_date=date(2024, 1, 1))
    db_session.add(challenge)
    db_session.commit()

    response = client.put(
        f"/api/admin/challenges/{challenge.id}", headers=auth_headers, json={"title": "Stew week"}
    )
    assert response.status_code == 204

    db_session.expire_all()
    assert challenge.title == "Stew week"
    assert challenge.description == "Seven soups"
    assert challenge.start_date == date(2024, 1, 1)


def test_update_challenge_errors(client, auth_headers, db_session):
    challenge = Challenge(title="Soup week")
    db_session.add(challenge)
    db_session.commit()

    assert client.put("/api/admin/challenges/missing", headers=auth_headers, json={}).status_code == 404
    response = client.put(f"/api/admin/challenges/{challenge.id}", headers=auth_headers, json={"title": "x"})
    assert response.status_code == 400


def test_delete_challenge(client, auth_headers, db_session, make_recipe):
    challenge = Challenge(title="Soup week")
    db_session.add(challenge)
    db_session.commit()
    recipe = make_recipe(title="Minestrone")
    client.put(f"/api/admin/challenges/{challenge.id}/recipes", headers=auth_headers,
               json={"recipe_ids": [recipe.id]})

    assert client.delete(f"/api/admin/challenges/{challenge.id}", headers=auth_headers).status_code == 204
    assert client.delete(f"/api/admin/challenges/{challenge.id}", headers=auth_headers).status_code == 404
    assert client.get("/api/challenges").json()["challenges"] == []
    assert db_session.scalars(select(ChallengeRecipe)).all() == []


def test_replace_challenge_recipes(client, auth_headers, db_session, make_recipe):
    challenge = Challenge(title="Soup week")
    db_session.add(challenge)
    db_session.commit()
    a = make_recipe(title="Minestrone")
    b = make_recipe(title="Borscht")
    c = make_recipe(title="Pho")

    url = f"/api/admin/challenges/{challenge.id}/recipes"
    assert client.put(url, headers=auth_headers, json={"recipe_ids": [a.id, b.id, a.id]}).status_code == 204
    listed = client.get("/api/challenges").json()["challenges"][0]
    assert listed["recipe_ids"] == sorted([a.id, b.id])

    client.put(url, headers=auth_headers, json={"recipe_ids": [c.id]})
    assert client.get("/api/challenges").json()["challenges"][0]["recipe_ids"] == [c.id]


def test_replace_challenge_recipes_unknown_recipe_keeps_links(client, auth_headers, db_session, make_recipe):
    challenge = Challenge(title="Soup week")
    db_session.add(challenge)
    db_session.commit()
    a = make_recipe(title="Minestrone")
    url = f"/api/admin/challenges/{challenge.id}/recipes"
    client.put(url, headers=auth_headers, json={"recipe_ids": [a.id]})

    response = client.put(url, headers=auth_headers, json={"recipe_ids": ["missing"]})
    assert response.status_code == 400
    assert client.get("/api/challenges").json()["challenges"][0]["recipe_ids"] == [a.id]


def test_replace_recipes_unknown_challenge(client, auth_headers):
    response = client.put("/api/admin/challenges/missing/recipes", headers=auth_headers, json={"recipe_ids": []})
    assert response.status_code == 404
