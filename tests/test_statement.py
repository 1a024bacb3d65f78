"""
Tests for statement construction and validity

Covers:
1. Path initialization (get-or-create of nested context)
2. Actor/object type resolution
3. Statement construction, cloning and identifiers
4. Context activity helpers
5. SubStatement restrictions
"""

import itertools
import json
import logging
from uuid import UUID

import pytest

from xapi.config import reset_config
from xapi.core import ensure_path, get_or_create, set_value
from xapi.schemas import (
    ACTOR_VARIANTS,
    Activity,
    Agent,
    Context,
    ContextActivities,
    Group,
    Statement,
    StatementRef,
    SubStatement,
    UnrecognizedObject,
    Verb,
    object_variants,
    resolve_actor,
    resolve_object,
    resolve_verb,
    variant_for,
)

ACTOR = "mailto:a@b.com"
VERB = "http://example.org/verbs/did"
OBJECT = "http://example.org/activities/x"


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    for name in ("XAPI_PRESERVE_IDS", "XAPI_ID_STRATEGY", "XAPI_DISPLAY_LANGUAGE"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def counting_ids():
    """Deterministic id generator: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def raw_statement():
    return {
        "actor": {"objectType": "Agent", "mbox": ACTOR, "name": "A"},
        "verb": {"id": VERB, "display": {"en-US": "did"}},
        "object": {"id": OBJECT},
        "id": "0b5c8d2e-6a4f-4a7e-9c55-8a1f2d3e4b5c",
        "timestamp": "2024-01-15T10:30:00Z",
        "result": {"completion": True},
    }


class TestEnsurePath:
    """Get-or-create of nested structure."""

    def test_creates_nested_list(self):
        """Missing parts are created; the list marker makes a list."""
        root = {}
        leaf = ensure_path(root, "context.contextActivities.parent[]")

        assert root == {"context": {"contextActivities": {"parent": []}}}
        assert leaf is root["context"]["contextActivities"]["parent"]

    def test_returns_same_reference(self):
        """A second call returns the existing list, not a new one."""
        root = {}
        first = ensure_path(root, "context.contextActivities.parent[]")
        first.append("a")

        second = ensure_path(root, "context.contextActivities.parent[]")

        assert second is first
        assert second == ["a"]

    def test_empty_list_is_not_reset(self):
        """An existing empty list counts as present."""
        root = {}
        first = ensure_path(root, "a.b[]")
        assert ensure_path(root, "a.b[]") is first

    def test_single_segment(self):
        root = {}
        leaf = ensure_path(root, "context")
        assert leaf == {}
        assert root["context"] is leaf

    def test_existing_mapping_kept(self):
        existing = {"registration": "r-1"}
        root = {"context": existing}
        assert ensure_path(root, "context") is existing

    def test_falsy_scalar_replaced(self):
        """Falsy placeholders are replaced by a container."""
        root = {"a": "", "b": None, "c": 0}
        assert ensure_path(root, "a") == {}
        assert ensure_path(root, "b[]") == []
        assert ensure_path(root, "c.d") == {}
        assert root == {"a": {}, "b": [], "c": {"d": {}}}

    def test_typed_children_on_models(self):
        """Models create the child types they declare."""
        stmt = Statement(ACTOR, VERB, OBJECT)
        leaf = ensure_path(stmt, "context.contextActivities.parent[]")

        assert isinstance(stmt.context, Context)
        assert isinstance(stmt.context.contextActivities, ContextActivities)
        assert leaf == []
        assert stmt.context.contextActivities.parent is leaf

    def test_get_or_create_on_attributes(self):
        class Holder:
            items = None

        holder = Holder()
        created = get_or_create(holder, "items", list)
        assert created == []
        assert get_or_create(holder, "items", list) is created

    def test_set_value_on_mapping_and_model(self):
        """A plain dict and a model are both written in place."""
        mapping = {"language": "en-US"}
        assert set_value(mapping, "registration", "r-1") == "r-1"
        assert mapping == {"language": "en-US", "registration": "r-1"}

        context = Context()
        set_value(context, "registration", "r-2")
        assert context.registration == "r-2"


class TestResolver:
    """Discriminator dispatch for actor and object values."""

    def test_actor_default_is_agent(self):
        actor = resolve_actor({"mbox": ACTOR})
        assert isinstance(actor, Agent)
        assert actor.objectType == "Agent"

    def test_actor_group(self):
        actor = resolve_actor({"objectType": "Group", "member": [{"mbox": ACTOR}]})
        assert isinstance(actor, Group)
        assert isinstance(actor.member[0], Agent)

    def test_object_default_is_activity(self):
        """No objectType and no other markers means Activity."""
        obj = resolve_object({"id": OBJECT})
        assert isinstance(obj, Activity)

    def test_object_agent_is_not_activity(self):
        obj = resolve_object({"objectType": "Agent", "mbox": ACTOR})
        assert isinstance(obj, Agent)
        assert not isinstance(obj, Activity)

    @pytest.mark.parametrize("tag, expected", [
        ("Activity", Activity),
        ("Agent", Agent),
        ("Group", Group),
        ("StatementRef", StatementRef),
    ])
    def test_object_dispatch(self, tag, expected):
        assert isinstance(resolve_object({"objectType": tag, "id": OBJECT}), expected)

    def test_object_substatement(self):
        obj = resolve_object({
            "objectType": "SubStatement",
            "actor": {"mbox": ACTOR},
            "verb": {"id": VERB},
            "object": {"id": OBJECT},
        })
        assert isinstance(obj, SubStatement)
        assert obj.is_valid()

    def test_unknown_tag_kept_raw(self):
        """Unknown discriminators become an explicit pass-through, not an error."""
        raw = {"objectType": "Widget", "id": "w-1"}
        obj = resolve_object(raw)

        assert isinstance(obj, UnrecognizedObject)
        assert obj.root == raw
        assert obj.objectType == "Widget"
        assert not obj.is_valid()

    def test_unknown_tag_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="xapi.schemas.resolver"):
            resolve_actor({"objectType": "Robot"})

        record = caplog.records[-1]
        assert record.slot == "actor"
        assert record.object_type == "Robot"

    def test_non_mapping_kept_raw(self):
        assert isinstance(resolve_object(42), UnrecognizedObject)

    def test_activity_is_not_an_actor(self):
        actor = resolve_actor(Activity(id=OBJECT))
        assert isinstance(actor, UnrecognizedObject)
        assert not actor.is_valid()

    @pytest.mark.parametrize("empty", [None, "", {}])
    def test_empty_stays_empty(self, empty):
        assert resolve_actor(empty) is None
        assert resolve_object(empty) is None
        assert resolve_verb(empty) is None

    def test_typed_values_returned_unchanged(self):
        """Resolving an already typed value is a no-op."""
        agent = Agent(mbox=ACTOR)
        group = Group(name="team", member=[agent])
        activity = Activity(id=OBJECT)
        verb = Verb(id=VERB)

        assert resolve_actor(agent) is agent
        assert resolve_actor(group) is group
        assert resolve_object(activity) is activity
        assert resolve_object(agent) is agent
        assert resolve_verb(verb) is verb

    def test_resolving_twice_is_idempotent(self):
        once = resolve_object({"objectType": "StatementRef", "id": "s-1"})
        assert resolve_object(once) is once

    def test_variant_for(self):
        assert variant_for(None, ACTOR_VARIANTS) is Agent
        assert variant_for("Group", ACTOR_VARIANTS) is Group
        assert variant_for("Activity", ACTOR_VARIANTS) is None
        assert variant_for("SubStatement", object_variants()) is SubStatement
        assert variant_for(["unhashable"], object_variants()) is None


class TestStatement:
    """Construction, validity and identifiers."""

    def test_string_shorthand(self):
        """IFI, verb id and activity id strings become typed parts."""
        stmt = Statement(ACTOR, VERB, OBJECT)

        assert isinstance(stmt.actor, Agent)
        assert stmt.actor.mbox == ACTOR
        assert isinstance(stmt.verb, Verb)
        assert stmt.verb.id == VERB
        assert isinstance(stmt.object, Activity)
        assert stmt.object.id == OBJECT
        assert stmt.is_valid()

    def test_wire_shape(self):
        stmt = Statement(ACTOR, VERB, OBJECT)
        wire = stmt.to_wire()

        assert wire["actor"] == {"objectType": "Agent", "mbox": ACTOR}
        assert wire["verb"] == {"id": VERB}
        assert wire["object"] == {"objectType": "Activity", "id": OBJECT}
        assert UUID(wire["id"])
        assert "context" not in wire

    @pytest.mark.parametrize("missing", ["actor", "verb", "object"])
    def test_missing_part_is_invalid(self, missing):
        parts = {"actor": ACTOR, "verb": VERB, "object": OBJECT}
        parts[missing] = None

        stmt = Statement(**parts)

        assert getattr(stmt, missing) is None
        assert not stmt.is_valid()

    def test_empty_statement_builds(self):
        stmt = Statement()
        assert not stmt.is_valid()
        assert stmt.id

    def test_invalid_part_is_invalid(self):
        """An actor without any identifier is not valid."""
        stmt = Statement({"name": "nobody"}, VERB, OBJECT)
        assert isinstance(stmt.actor, Agent)
        assert not stmt.is_valid()

    def test_raw_assignment_does_not_raise(self):
        stmt = Statement(ACTOR, VERB, OBJECT)
        stmt.actor = {"mbox": ACTOR}
        assert not stmt.is_valid()

    def test_whole_statement(self, raw_statement):
        """A raw statement as first argument is copied, extras included."""
        stmt = Statement(raw_statement)

        assert isinstance(stmt.actor, Agent)
        assert stmt.actor.name == "A"
        assert stmt.verb.get_display() == "did"
        assert isinstance(stmt.object, Activity)
        assert stmt.timestamp == "2024-01-15T10:30:00Z"
        assert stmt.result == {"completion": True}
        assert stmt.is_valid()

    def test_whole_statement_overrides_arguments(self, raw_statement):
        stmt = Statement(raw_statement, "http://example.org/verbs/other", "http://example.org/other")
        assert stmt.verb.id == VERB
        assert stmt.object.id == OBJECT

    def test_keyword_fields_pass_through(self):
        stmt = Statement(ACTOR, VERB, OBJECT, timestamp="2024-01-15T10:30:00Z")
        assert stmt.to_wire()["timestamp"] == "2024-01-15T10:30:00Z"

    def test_clone_gets_new_id(self):
        """Rebuilding from an existing statement does NOT keep its id."""
        original = Statement(ACTOR, VERB, OBJECT)
        clone = Statement(original)

        assert clone.id != original.id
        assert clone.is_valid()

    def test_clone_reuses_typed_parts(self):
        original = Statement(ACTOR, VERB, OBJECT)
        clone = Statement(original)

        assert clone.actor is original.actor
        assert clone.verb is original.verb
        assert clone.object is original.object

    def test_rebuild_from_raw_replaces_id(self, raw_statement):
        stmt = Statement(raw_statement)
        assert stmt.id != raw_statement["id"]

    def test_clone_logs_id_replacement(self, caplog):
        original = Statement(ACTOR, VERB, OBJECT)
        with caplog.at_level(logging.DEBUG, logger="xapi.schemas.statement"):
            clone = Statement(original)

        record = caplog.records[-1]
        assert record.previous_id == original.id
        assert record.statement_id == clone.id

    def test_preserve_id(self, raw_statement):
        stmt = Statement(raw_statement, preserve_id=True)
        assert stmt.id == raw_statement["id"]

    def test_preserve_id_without_existing_id(self, counting_ids):
        stmt = Statement(ACTOR, VERB, OBJECT, id_generator=counting_ids, preserve_id=True)
        assert stmt.id == "id-1"

    def test_model_validate_keeps_id(self, raw_statement):
        """Parsing a stored statement normalizes parts but keeps its id."""
        stmt = Statement.model_validate(raw_statement)

        assert stmt.id == raw_statement["id"]
        assert isinstance(stmt.actor, Agent)
        assert stmt.is_valid()

    def test_uuid_id_stored_as_string(self):
        stmt = Statement.model_validate({"id": UUID("0B5C8D2E-6A4F-4A7E-9C55-8A1F2D3E4B5C")})
        assert stmt.id == "0b5c8d2e-6a4f-4a7e-9c55-8a1f2d3e4b5c"

    def test_model_validate_without_id(self, raw_statement):
        """Parsing never invents an id the stored data did not have."""
        del raw_statement["id"]
        assert Statement.model_validate(raw_statement).id is None

    def test_model_validate_json_keeps_id(self, raw_statement):
        stmt = Statement.model_validate_json(json.dumps(raw_statement))
        assert stmt.id == raw_statement["id"]

    def test_constructor_after_parse_assigns_id(self, raw_statement, counting_ids):
        Statement.model_validate(raw_statement)
        stmt = Statement(ACTOR, VERB, OBJECT, id_generator=counting_ids)
        assert stmt.id == "id-1"

    def test_injected_id_generator(self, counting_ids):
        stmt = Statement(ACTOR, VERB, OBJECT, id_generator=counting_ids)
        assert stmt.id == "id-1"
        assert stmt.generate_registration() == "id-2"

    def test_default_id_generator(self):
        stmt = Statement(ACTOR, VERB, OBJECT)
        assert UUID(stmt.id).version == 4
        assert UUID(stmt.generate_registration()).version == 4

    def test_object_agent(self):
        stmt = Statement(ACTOR, VERB, {"objectType": "Agent", "mbox": "mailto:c@d.com"})
        assert isinstance(stmt.object, Agent)
        assert stmt.is_valid()

    def test_unknown_object_round_trips(self):
        raw = {"objectType": "Widget", "size": 3}
        stmt = Statement(ACTOR, VERB, raw)

        assert not stmt.is_valid()
        assert stmt.to_wire()["object"] == raw

    def test_render(self):
        stmt = Statement(ACTOR, VERB, OBJECT)
        text = stmt.render()

        assert text.startswith("\n")
        assert text.endswith("\n")
        assert '"context": null' in text
        assert str(stmt) == text

    def test_show(self, capsys):
        stmt = Statement(ACTOR, VERB, OBJECT)
        stmt.show()
        assert ACTOR in capsys.readouterr().out


class TestContextActivities:
    """Registration and context activity helpers."""

    def test_context_absent_until_mutation(self):
        stmt = Statement(ACTOR, VERB, OBJECT)
        assert stmt.context is None

    def test_generate_registration(self, counting_ids):
        stmt = Statement(ACTOR, VERB, OBJECT, id_generator=counting_ids)

        stmt.generate_registration()
        assert stmt.context.registration == "id-2"

        stmt.generate_registration()
        assert stmt.context.registration == "id-3"

    def test_generate_registration_on_plain_context(self, counting_ids):
        """A context held as a plain dict gets the registration key."""
        stmt = Statement(ACTOR, VERB, OBJECT, id_generator=counting_ids)
        stmt.context = {"language": "en-US"}

        assert stmt.generate_registration() == "id-2"
        assert stmt.context == {"language": "en-US", "registration": "id-2"}

    def test_parent_activities_in_order(self):
        """Three appends produce three entries in call order."""
        stmt = Statement(ACTOR, VERB, OBJECT)
        stmt.add_parent_activity("http://example.org/a")
        stmt.add_parent_activity({"id": "http://example.org/b"})
        stmt.add_parent_activity(Activity(id="http://example.org/c"))

        parent = stmt.context.contextActivities.parent
        assert [a.id for a in parent] == [
            "http://example.org/a",
            "http://example.org/b",
            "http://example.org/c",
        ]
        assert all(isinstance(a, Activity) for a in parent)

    def test_no_dedup(self):
        stmt = Statement(ACTOR, VERB, OBJECT)
        stmt.add_grouping_activity(OBJECT)
        stmt.add_grouping_activity(OBJECT)
        assert len(stmt.context.contextActivities.grouping) == 2

    def test_lists_are_separate(self):
        stmt = Statement(ACTOR, VERB, OBJECT)
        stmt.add_grouping_activity("http://example.org/g")
        stmt.add_other_context_activity("http://example.org/o")

        activities = stmt.context.contextActivities
        assert activities.parent is None
        assert [a.id for a in activities.grouping] == ["http://example.org/g"]
        assert [a.id for a in activities.other] == ["http://example.org/o"]

    def test_registration_kept_when_adding_activities(self, counting_ids):
        stmt = Statement(ACTOR, VERB, OBJECT, id_generator=counting_ids)
        registration = stmt.generate_registration()
        stmt.add_parent_activity(OBJECT)
        assert stmt.context.registration == registration

    def test_appends_to_existing_context(self):
        stmt = Statement(
            ACTOR, VERB, OBJECT,
            context={"contextActivities": {"parent": {"id": "http://example.org/a"}}},
        )
        stmt.add_parent_activity("http://example.org/b")

        assert [a.id for a in stmt.context.contextActivities.parent] == [
            "http://example.org/a",
            "http://example.org/b",
        ]

    def test_wire_context(self, counting_ids):
        stmt = Statement(ACTOR, VERB, OBJECT, id_generator=counting_ids)
        stmt.generate_registration()
        stmt.add_other_context_activity(OBJECT)

        assert stmt.to_wire()["context"] == {
            "registration": "id-2",
            "contextActivities": {
                "other": [{"objectType": "Activity", "id": OBJECT}],
            },
        }


class TestSubStatement:
    """The nested, restricted statement variant."""

    @pytest.fixture
    def sub_data(self):
        return {
            "actor": {"mbox": ACTOR},
            "verb": {"id": VERB, "display": {"en-US": "did"}},
            "object": {"id": OBJECT},
        }

    def test_tagged(self, sub_data):
        sub = SubStatement(sub_data)
        assert sub.objectType == "SubStatement"
        assert sub.get_type() == "SubStatement"
        assert sub.is_valid()

    def test_restricted_fields_dropped(self, sub_data):
        """id, stored, version and authority never make it onto the instance."""
        sub = SubStatement({
            **sub_data,
            "id": "s-1",
            "stored": "2024-01-15T10:30:00Z",
            "version": "1.0.3",
            "authority": {"mbox": "mailto:lrs@example.org"},
            "timestamp": "2024-01-15T10:30:00Z",
        })

        for name in ("id", "stored", "version", "authority"):
            assert not hasattr(sub, name)
            assert name not in (sub.model_extra or {})
        assert sub.timestamp == "2024-01-15T10:30:00Z"
        assert sub.is_valid()

    def test_built_from_statement_has_no_id(self):
        stmt = Statement(ACTOR, VERB, OBJECT)
        sub = SubStatement(stmt)

        assert not hasattr(sub, "id")
        assert "id" not in sub.to_wire()
        assert sub.is_valid()

    def test_model_validate_drops_restricted_fields(self, sub_data):
        sub = SubStatement.model_validate({**sub_data, "id": "s-1", "version": "1.0.0"})
        assert "id" not in (sub.model_extra or {})
        assert "version" not in (sub.model_extra or {})

    def test_no_nesting(self, sub_data):
        """A SubStatement whose object is another SubStatement is invalid."""
        inner = {"objectType": "SubStatement", **sub_data}
        sub = SubStatement(ACTOR, VERB, inner)

        assert isinstance(sub.object, SubStatement)
        assert sub.object.is_valid()
        assert not sub.is_valid()

    def test_restricted_field_assigned_later(self, sub_data):
        sub = SubStatement(sub_data)
        sub.stored = "2024-01-15T10:30:00Z"
        assert not sub.is_valid()

    def test_wrong_tag_is_invalid(self, sub_data):
        sub = SubStatement(sub_data)
        sub.objectType = "Activity"
        assert not sub.is_valid()

    def test_as_statement_object(self, sub_data):
        stmt = Statement(ACTOR, "http://example.org/verbs/planned", {
            "objectType": "SubStatement",
            "id": "should-go",
            **sub_data,
        })

        assert isinstance(stmt.object, SubStatement)
        assert stmt.is_valid()
        assert stmt.id

        wire = stmt.to_wire()
        assert wire["object"]["objectType"] == "SubStatement"
        assert "id" not in wire["object"]

    def test_get_display(self, sub_data):
        sub = SubStatement(sub_data)
        assert sub.get_display() == f"{ACTOR}:did:{OBJECT}"

    def test_get_display_falls_back_to_verb_id(self):
        sub = SubStatement(ACTOR, VERB, OBJECT)
        assert sub.get_display() == f"{ACTOR}:{VERB}:{OBJECT}"

    def test_get_display_invalid(self):
        sub = SubStatement(ACTOR, VERB)
        assert sub.get_display() is None
