"""Tests for the document element models."""

import pytest
from pydantic import ValidationError

from scriptdesk.models import (
    ELEMENT_TYPE_ORDER,
    ElementType,
    SceneOutline,
    ScriptElement,
)


class TestScriptElement:
    """Test ScriptElement behavior."""

    def test_defaults(self):
        element = ScriptElement()
        assert element.type is ElementType.ACTION
        assert element.content == ""
        assert element.sequence == 1
        assert element.id

    def test_ids_are_unique(self):
        assert ScriptElement().id != ScriptElement().id

    def test_is_frozen(self):
        element = ScriptElement(content="x")
        with pytest.raises(ValidationError):
            element.content = "y"

    def test_evolve_returns_copy(self):
        element = ScriptElement(content="x")
        updated = element.evolve(content="y")
        assert element.content == "x"
        assert updated.content == "y"
        assert updated.id == element.id

    def test_sequence_must_be_positive(self):
        with pytest.raises(ValidationError):
            ScriptElement(sequence=0)

    def test_accepts_camel_case_aliases(self):
        element = ScriptElement(sceneId="s1", sceneNumber="3")
        assert element.scene_id == "s1"
        assert element.scene_number == "3"

    def test_to_storage_uses_aliases_and_drops_none(self):
        element = ScriptElement(
            id="e1",
            type=ElementType.SCENE_HEADING,
            content="INT. HOUSE",
            scene_id="e1",
            scene_number="4A",
        )
        assert element.to_storage() == {
            "id": "e1",
            "type": "scene_heading",
            "content": "INT. HOUSE",
            "sequence": 1,
            "sceneId": "e1",
            "dual": False,
            "sceneNumber": "4A",
        }


class TestSceneOutline:
    """Test SceneOutline validation."""

    def test_strips_heading(self):
        assert SceneOutline(heading="  int. house ").heading == "int. house"

    def test_rejects_blank_heading(self):
        with pytest.raises(ValidationError):
            SceneOutline(heading="   ")

    def test_action_notes_alias(self):
        outline = SceneOutline(heading="INT. A", actionNotes=["One"])
        assert outline.action_notes == ["One"]


def test_type_order_covers_all_types():
    assert set(ELEMENT_TYPE_ORDER) == set(ElementType)
    assert len(ELEMENT_TYPE_ORDER) == len(ElementType)
