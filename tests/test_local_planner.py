"""Tests for the deterministic local planner."""
from appforge.planner.local import (
    classify_hint,
    extract_app_name,
    make_local_plan,
    split_field_tokens,
)


def test_habit_tracker_prompt_yields_five_typed_fields():
    """Test the habit tracker prompt: one entity with exactly the five listed fields."""
    prompt = (
        "Build a habit tracker with fields: habitName, frequency (daily, weekly), "
        "streak (number), lastCompletedDate (date), active (boolean)."
    )

    plan = make_local_plan(prompt)

    assert plan.generation_mode == "local"
    assert plan.ai_provider is None
    assert plan.app_name == "Habit Tracker"
    assert len(plan.entities) == 1

    fields = [(f.name, f.type, f.enum_values) for f in plan.entities[0].fields]
    assert fields == [
        ("habitName", "string", None),
        ("frequency", "enum", ["daily", "weekly"]),
        ("streak", "number", None),
        ("lastCompletedDate", "date", None),
        ("active", "boolean", None),
    ]


def test_empty_prompt_yields_default_fields():
    """Test that an empty prompt still produces one entity with the two synthetic fields."""
    plan = make_local_plan("")

    assert plan.app_name == "Generated CRUD App"
    assert len(plan.entities) == 1
    entity = plan.entities[0]
    assert entity.name == "items"

    title, status = entity.fields
    assert (title.name, title.type, title.required) == ("title", "string", True)
    assert (status.name, status.type) == ("status", "enum")
    assert status.enum_values == ["todo", "doing", "done"]


def test_none_prompt_is_treated_as_empty():
    plan = make_local_plan(None)
    assert [f.name for f in plan.entities[0].fields] == ["title", "status"]


def test_entity_name_from_for_phrase():
    plan = make_local_plan("Build an inventory app for products. Fields: sku, price (float), notes")

    entity = plan.entities[0]
    assert entity.name == "products"
    assert entity.title == "Products"
    assert [(f.name, f.type) for f in entity.fields] == [
        ("sku", "string"),
        ("price", "number"),
        ("notes", "string"),
    ]


def test_quoted_app_name_wins_over_build_phrase():
    assert extract_app_name('Build a tracker called "Daily Wins" with fields: x') == "Daily Wins"
    assert extract_app_name("make something") == "Generated CRUD App"
    assert extract_app_name("build an expense_log. fields: amount") == "Expense Log"


def test_app_name_is_capped():
    name = extract_app_name("build a " + "very " * 30 + "long app")
    assert len(name) == 60


def test_id_and_malformed_tokens_are_dropped():
    plan = make_local_plan("Fields: id, title, bad token here, due (date)")

    assert [f.name for f in plan.entities[0].fields] == ["title", "due"]


def test_only_id_falls_back_to_defaults():
    plan = make_local_plan("fields: id")
    assert [f.name for f in plan.entities[0].fields] == ["title", "status"]


def test_split_field_tokens_respects_parentheses_and_cap():
    tokens = split_field_tokens("a (x, y); b\nc (number).")
    assert tokens == ["a (x, y)", "b", "c (number)"]

    many = split_field_tokens(", ".join(f"f{i}" for i in range(40)))
    assert len(many) == 25


def test_classify_hint():
    assert classify_hint("low, high") == {"type": "enum", "enumValues": ["low", "high"]}
    assert classify_hint("integer") == {"type": "number"}
    assert classify_hint("bool") == {"type": "boolean"}
    assert classify_hint("due date") == {"type": "date"}
    assert classify_hint("enum") == {"type": "enum", "enumValues": ["OptionA", "OptionB"]}
    assert classify_hint("free text") == {"type": "string"}
    assert classify_hint("") == {"type": "string"}


def test_local_planner_is_deterministic():
    prompt = "Build a reading list for books. Fields: title, finished (bool), rating (int)"
    assert make_local_plan(prompt) == make_local_plan(prompt)
