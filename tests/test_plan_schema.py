"""Tests for the Plan schema and the lenient plan normalizer."""
import pytest
from pydantic import ValidationError
from appforge.planner.schema import (
    DEFAULT_STATUS_VALUES,
    PLACEHOLDER_ENUM_VALUES,
    EntitySpec,
    FieldSpec,
    Plan,
    normalize_plan,
    to_entity_name,
    to_identifier,
    validate_provider_payload,
)


def _entity(**overrides):
    data = {"name": "tasks", "fields": [{"name": "title", "type": "string", "required": True}]}
    data.update(overrides)
    return data


def test_plan_wire_form_uses_camel_case_and_omits_absent_provider():
    """Test that to_dict() emits camelCase keys and leaves out aiProvider when not set."""
    plan = Plan.model_validate({
        "appName": "Todo",
        "description": "Tasks",
        "generationMode": "local",
        "entities": [_entity(fields=[
            {"name": "title", "type": "string", "required": True},
            {"name": "status", "type": "enum", "enumValues": ["open", "closed"]},
        ])],
    })

    data = plan.to_dict()

    assert data["appName"] == "Todo"
    assert data["generationMode"] == "local"
    assert "aiProvider" not in data
    entity = data["entities"][0]
    assert entity["title"] == "Tasks", "Title should be derived from the entity name"
    assert entity["fields"][1]["enumValues"] == ["open", "closed"]
    assert "enumValues" not in entity["fields"][0]


def test_plan_requires_at_least_one_entity():
    with pytest.raises(ValidationError):
        Plan.model_validate({"appName": "Empty", "entities": []})


def test_ai_provider_only_allowed_in_ai_mode():
    """Test that aiProvider is rejected unless generationMode is ai."""
    with pytest.raises(ValidationError):
        Plan.model_validate({
            "appName": "X",
            "generationMode": "local",
            "aiProvider": "gemini",
            "entities": [_entity()],
        })

    plan = Plan.model_validate({
        "appName": "X",
        "generationMode": "ai",
        "aiProvider": "gemini",
        "entities": [_entity()],
    })
    assert plan.ai_provider == "gemini"


def test_enum_field_requires_values_and_other_types_reject_them():
    with pytest.raises(ValidationError):
        FieldSpec(name="status", type="enum")
    with pytest.raises(ValidationError):
        FieldSpec(name="status", type="enum", enum_values=[])
    with pytest.raises(ValidationError):
        FieldSpec(name="title", type="string", enum_values=["a"])


def test_field_named_id_is_rejected():
    with pytest.raises(ValidationError):
        FieldSpec(name="id")
    with pytest.raises(ValidationError):
        FieldSpec(name="ID")


def test_entity_field_names_are_unique_case_insensitively():
    with pytest.raises(ValidationError):
        EntitySpec.model_validate(_entity(fields=[
            {"name": "title", "type": "string"},
            {"name": "Title", "type": "text"},
        ]))


def test_entity_name_must_be_lowercase_and_not_reserved():
    with pytest.raises(ValidationError):
        EntitySpec.model_validate(_entity(name="Tasks"))
    with pytest.raises(ValidationError):
        EntitySpec.model_validate(_entity(name="health"))
    with pytest.raises(ValidationError):
        EntitySpec.model_validate(_entity(name="class"))


def test_plan_entity_names_are_unique():
    with pytest.raises(ValidationError):
        Plan.model_validate({"appName": "X", "entities": [_entity(), _entity()]})


def test_identifier_helpers():
    """Test name sanitizing used by the normalizer."""
    assert to_identifier("habitName") == "habitName", "Case must be preserved"
    assert to_identifier("due date!") == "due_date"
    assert to_identifier("2nd place") == "f_2nd_place"
    assert to_identifier("class") == "class_"
    assert to_identifier("!!!") == ""

    assert to_entity_name("Habit Logs") == "habit_logs"
    assert to_entity_name("") == "items"
    assert to_entity_name("spec") == "spec_items"
    assert to_entity_name("Health") == "health_items"


def test_normalize_plan_repairs_messy_input():
    """Test that the normalizer coerces a messy plan into a valid one."""
    raw = {
        "appName": "  Recipe Box  ",
        "entities": [
            {
                "name": "Recipes",
                "fields": [
                    {"name": "id", "type": "number"},
                    {"name": "title", "type": "string", "required": True},
                    {"name": "Title", "type": "text"},
                    {"name": "servings", "type": "integer"},
                    {"name": "course", "type": "enum", "enumValues": ["main", "main", 3, " "]},
                    {"name": "mood", "type": "enum"},
                    "not a field",
                ],
            },
            {"name": "recipes", "fields": []},
        ],
    }

    plan = normalize_plan(raw)

    assert plan.app_name == "Recipe Box"
    assert plan.generation_mode == "local"
    assert [e.name for e in plan.entities] == ["recipes", "recipes_2"]

    fields = {f.name: f for f in plan.entities[0].fields}
    assert list(fields) == ["title", "servings", "course", "mood"], "id and duplicate names must be dropped"
    assert fields["servings"].type == "string", "Unknown types fall back to string"
    assert fields["course"].enum_values == ["main", "3"]
    assert fields["mood"].enum_values == PLACEHOLDER_ENUM_VALUES

    defaults = plan.entities[1].fields
    assert [f.name for f in defaults] == ["title", "status"]
    assert defaults[0].required is True
    assert defaults[1].enum_values == DEFAULT_STATUS_VALUES


def test_normalize_plan_without_entities_produces_default_items():
    plan = normalize_plan({})

    assert plan.app_name == "Generated CRUD App"
    assert len(plan.entities) == 1
    assert plan.entities[0].name == "items"
    assert plan.entities[0].title == "Items"


def test_normalize_plan_caps_app_name_and_enum_values():
    raw = {
        "appName": "x" * 100,
        "entities": [{"name": "things", "fields": [
            {"name": "kind", "type": "enum", "enumValues": [f"v{i}" for i in range(80)]},
        ]}],
    }

    plan = normalize_plan(raw, generation_mode="ai", ai_provider="openai")

    assert len(plan.app_name) == 60
    assert len(plan.entities[0].fields[0].enum_values) == 50
    assert plan.ai_provider == "openai"


def test_normalize_plan_drops_provider_outside_ai_mode():
    plan = normalize_plan({}, generation_mode="fallback", ai_provider="gemini")
    assert plan.ai_provider is None


def test_validate_provider_payload_is_strict():
    """Test that provider output must match the plan shape exactly before normalization."""
    good = {
        "appName": "Todo",
        "entities": [{"name": "tasks", "fields": [{"name": "title", "type": "string"}]}],
    }
    assert validate_provider_payload(good)["appName"] == "Todo"

    with pytest.raises(ValueError):
        validate_provider_payload([good])
    with pytest.raises(ValueError):
        validate_provider_payload({"plan": good})
    with pytest.raises(ValueError):
        validate_provider_payload({
            "appName": "Todo",
            "entities": [{"name": "tasks", "fields": [{"name": "n", "type": "integer"}]}],
        })
    with pytest.raises(ValueError):
        validate_provider_payload({"appName": "Todo", "entities": [{"name": "tasks", "fields": []}]})
