# tests/unit/test_ticket_rules.py
"""
Unit tests for the ticket hierarchy rules.
"""

import pytest

from conftest import make_ticket
from workboard.core.domain.errors import DomainRuleCode, DomainRuleError
from workboard.core.domain.rules import (
    validate_deletable,
    validate_parent,
    validate_subtask_parent,
    validate_ticket,
)
from workboard.core.domain.schemas import CreateTicketInput


class TestSelfParent:
    """validate_parent without the project set."""

    def test_self_parent_rejected(self):
        """A ticket whose parent_id is its own id is rejected."""
        ticket = make_ticket("t1", parent_id="t1")

        with pytest.raises(DomainRuleError) as exc:
            validate_parent(ticket)

        assert exc.value.code == DomainRuleCode.INVALID_TICKET_PARENT
        assert exc.value.field == "parent_id"

    @pytest.mark.parametrize("parent_id", [None, "t2", "other"])
    def test_other_parents_accepted(self, parent_id):
        validate_parent(make_ticket("t1", parent_id=parent_id))

    def test_partial_mode_skips_multi_level_check(self):
        """Without the project set only the self-parent check runs."""
        validate_parent(make_ticket("t3", parent_id="t2"))

    def test_creation_input_has_no_id(self):
        data = CreateTicketInput(project_id="p1", title="New", status="todo", parent_id="t1")
        validate_parent(data)


class TestMultiLevel:
    """validate_parent with the full project set."""

    def test_top_level_parent_accepted(self):
        parent = make_ticket("P")
        child = make_ticket("C", parent_id="P")

        validate_parent(child, [parent, child])

    def test_nested_parent_rejected(self):
        grandparent = make_ticket("G")
        parent = make_ticket("P", parent_id="G")
        child = make_ticket("C", parent_id="P")

        with pytest.raises(DomainRuleError) as exc:
            validate_parent(child, [grandparent, parent, child])

        assert exc.value.code == DomainRuleCode.INVALID_TICKET_PARENT_MULTI_LEVEL

    def test_ticket_with_subtasks_cannot_be_nested(self):
        other = make_ticket("O")
        ticket = make_ticket("T", parent_id="O")
        subtask = make_ticket("S", parent_id="T")

        with pytest.raises(DomainRuleError) as exc:
            validate_ticket(ticket, [other, make_ticket("T"), subtask])

        assert exc.value.code == DomainRuleCode.INVALID_TICKET_PARENT_MULTI_LEVEL

    def test_unknown_parent_is_not_a_rule_violation(self):
        validate_parent(make_ticket("C", parent_id="missing"), [make_ticket("C")])

    def test_empty_parent_id_is_not_top_level(self):
        """An empty parent_id still goes through the nesting checks."""
        ticket = make_ticket("T", parent_id="")
        subtask = make_ticket("S", parent_id="T")

        with pytest.raises(DomainRuleError) as exc:
            validate_parent(ticket, [make_ticket("T"), subtask])

        assert exc.value.code == DomainRuleCode.INVALID_TICKET_PARENT_MULTI_LEVEL


class TestSubtaskParent:

    def test_subtask_parent_must_be_top_level(self):
        with pytest.raises(DomainRuleError) as exc:
            validate_subtask_parent(make_ticket("P", parent_id="G"), "p1")

        assert exc.value.code == DomainRuleCode.INVALID_TICKET_PARENT_MULTI_LEVEL

    def test_subtask_parent_must_share_project(self):
        with pytest.raises(DomainRuleError) as exc:
            validate_subtask_parent(make_ticket("P", project_id="p2"), "p1")

        assert exc.value.code == DomainRuleCode.TICKET_PROJECT_MISMATCH
        assert exc.value.field == "project_id"


class TestDeletable:

    def test_ticket_with_subtask_not_deletable(self):
        parent = make_ticket("P")
        tickets = [parent, make_ticket("C", parent_id="P")]

        with pytest.raises(DomainRuleError) as exc:
            validate_deletable(parent, tickets)

        assert exc.value.code == DomainRuleCode.TICKET_HAS_SUBTASKS

    def test_leaf_ticket_deletable(self):
        child = make_ticket("C", parent_id="P")
        validate_deletable(child, [make_ticket("P"), child])
