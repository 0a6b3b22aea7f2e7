"""Tests for the weekly meal plan.

Tests cover:
- Week window arithmetic (month and leap-day boundaries)
- All-or-nothing range replacement
- Per-user isolation
- /api/planner/week endpoints
"""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from recipehub.models import User
from recipehub.services.planner import (
    InvalidDateRange,
    PlannedMealInput,
    compute_week_end_inclusive,
    list_planned_meals,
    parse_week_start,
    replace_range,
)

WEEK_START = date(2024, 1, 1)
WEEK_END = date(2024, 1, 7)


@pytest.mark.parametrize("start,end", [
    ("2024-01-01", date(2024, 1, 7)),
    ("2024-02-26", date(2024, 3, 3)),
    ("2023-02-26", date(2023, 3, 4)),
    ("2024-03-29", date(2024, 4, 4)),
    ("2024-12-30", date(2025, 1, 5)),
])
def test_week_end_inclusive(start, end):
    assert compute_week_end_inclusive(start) == end


@pytest.mark.parametrize("value", [
    None, "", "2024-13-01", "2024-02-30", "01/01/2024",
    "2024-01-01garbage", "2024-01-01 10:00", " 2024-01-0",
])
def test_parse_week_start_rejects_bad_dates(value):
    with pytest.raises(InvalidDateRange):
        parse_week_start(value)


def test_parse_week_start_accepts_datetime_string():
    assert parse_week_start("2024-01-01T10:00:00Z") == WEEK_START


def test_replace_range_swaps_week(db_session, user, make_recipe):
    a = make_recipe(title="A")
    b = make_recipe(title="B")
    replace_range(db_session, user.id, WEEK_START, WEEK_END, [
        PlannedMealInput(date(2024, 1, 1), "lunch", a.id),
        PlannedMealInput(date(2024, 1, 2), "dinner", a.id),
    ])
    # Outside the window, must survive the replace
    replace_range(db_session, user.id, date(2024, 1, 8), date(2024, 1, 14), [
        PlannedMealInput(date(2024, 1, 8), "lunch", a.id),
    ])

    replace_range(db_session, user.id, WEEK_START, WEEK_END, [
        PlannedMealInput(date(2024, 1, 3), "breakfast", b.id),
        PlannedMealInput(date(2024, 1, 4), "lunch", b.id, servings=3),
        PlannedMealInput(date(2024, 1, 7), "snack", b.id),
    ])

    meals = list_planned_meals(db_session, user.id, WEEK_START, WEEK_END)
    assert len(meals) == 3
    assert {m.recipe_id for m in meals} == {b.id}
    assert [m.planned_date for m in meals] == [date(2024, 1, 3), date(2024, 1, 4), date(2024, 1, 7)]
    assert len(list_planned_meals(db_session, user.id, date(2024, 1, 8), date(2024, 1, 14))) == 1


def test_replace_range_with_empty_list_clears(db_session, user, make_recipe):
    a = make_recipe()
    replace_range(db_session, user.id, WEEK_START, WEEK_END, [PlannedMealInput(WEEK_START, "lunch", a.id)])
    replace_range(db_session, user.id, WEEK_START, WEEK_END, [])
    assert list_planned_meals(db_session, user.id, WEEK_START, WEEK_END) == []


def test_replace_range_rolls_back_on_unknown_recipe(db_session, user, make_recipe):
    a = make_recipe()
    replace_range(db_session, user.id, WEEK_START, WEEK_END, [
        PlannedMealInput(date(2024, 1, 1), "lunch", a.id),
        PlannedMealInput(date(2024, 1, 2), "lunch", a.id),
    ])

    with pytest.raises(IntegrityError):
        replace_range(db_session, user.id, WEEK_START, WEEK_END, [
            PlannedMealInput(date(2024, 1, 5), "dinner", a.id),
            PlannedMealInput(date(2024, 1, 6), "dinner", "no-such-recipe"),
        ])

    meals = list_planned_meals(db_session, user.id, WEEK_START, WEEK_END)
    assert [m.planned_date for m in meals] == [date(2024, 1, 1), date(2024, 1, 2)]


def test_replace_range_rejects_bad_ranges(db_session, user, make_recipe):
    a = make_recipe()
    with pytest.raises(InvalidDateRange):
        replace_range(db_session, user.id, WEEK_END, WEEK_START, [])
    with pytest.raises(InvalidDateRange):
        replace_range(db_session, user.id, WEEK_START, WEEK_END, [
            PlannedMealInput(date(2024, 1, 8), "lunch", a.id),
        ])
    with pytest.raises(InvalidDateRange):
        replace_range(db_session, user.id, WEEK_START, WEEK_END, [
            PlannedMealInput(date(2024, 1, 2), "brunch", a.id),
        ])
    with pytest.raises(InvalidDateRange):
        list_planned_meals(db_session, user.id, WEEK_END, WEEK_START)


def test_plans_are_per_user(db_session, user, make_recipe):
    other = User(email="other@example.com")
    db_session.add(other)
    db_session.commit()
    a = make_recipe()

    replace_range(db_session, user.id, WEEK_START, WEEK_END, [PlannedMealInput(WEEK_START, "lunch", a.id)])
    replace_range(db_session, other.id, WEEK_START, WEEK_END, [])

    assert len(list_planned_meals(db_session, user.id, WEEK_START, WEEK_END)) == 1
    assert list_planned_meals(db_session, other.id, WEEK_START, WEEK_END) == []


# --- Endpoints ---

def test_put_then_get_week(client, auth_headers, make_recipe):
    a = make_recipe()
    response = client.put("/api/planner/week", headers=auth_headers, json={
        "week_start": "2024-02-26",
        "items": [
            {"date": "2024-02-29", "meal_slot": "dinner", "recipe_id": a.id, "servings": 4},
            {"date": "2024-03-03", "meal_slot": "lunch", "recipe_id": a.id},
        ],
    })
    assert response.status_code == 204

    response = client.get("/api/planner/week", params={"weekStart": "2024-02-26"}, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["week_end"] == "2024-03-03"
    assert [(i["planned_date"], i["meal_slot"], i["servings"]) for i in data["items"]] == [
        ("2024-02-29", "dinner", 4),
        ("2024-03-03", "lunch", None),
    ]


def test_put_week_unknown_recipe_keeps_old_plan(client, auth_headers, make_recipe):
    a = make_recipe()
    body = {"week_start": "2024-01-01", "items": [{"date": "2024-01-01", "meal_slot": "lunch", "recipe_id": a.id}]}
    assert client.put("/api/planner/week", headers=auth_headers, json=body).status_code == 204

    body["items"] = [{"date": "2024-01-02", "meal_slot": "lunch", "recipe_id": "missing"}]
    assert client.put("/api/planner/week", headers=auth_headers, json=body).status_code == 400

    data = client.get("/api/planner/week", params={"weekStart": "2024-01-01"}, headers=auth_headers).json()
    assert [i["planned_date"] for i in data["items"]] == ["2024-01-01"]


def test_put_week_validation(client, auth_headers, make_recipe):
    a = make_recipe()
    outside = {"week_start": "2024-01-01", "items": [{"date": "2024-01-09", "meal_slot": "lunch", "recipe_id": a.id}]}
    assert client.put("/api/planner/week", headers=auth_headers, json=outside).status_code == 400

    bad_slot = {"week_start": "2024-01-01", "items": [{"date": "2024-01-02", "meal_slot": "brunch", "recipe_id": a.id}]}
    assert client.put("/api/planner/week", headers=auth_headers, json=bad_slot).status_code == 422


def test_get_week_bad_date(client, auth_headers):
    response = client.get("/api/planner/week", params={"weekStart": "nope"}, headers=auth_headers)
    assert response.status_code == 400


def test_planner_requires_user(client):
    assert client.get("/api/planner/week", params={"weekStart": "2024-01-01"}).status_code == 401


def test_get_week_trailing_garbage(client, auth_headers):
    response = client.get(
        "/api/planner/week", params={"weekStart": "2024-01-01garbage"}, headers=auth_headers
    )
    assert response.status_code == 400
