"""Permissions — verifies permission-name parsing and principal checks."""

import pytest

from tradedesk.core.permissions import (
    SUPER_ADMIN_ROLE, Principal, crud_permissions, has_permission, parse_permission,
)


def test_parse_simple_permission():
    assert parse_permission("view.user") == ("view", "user")


def test_parse_nested_resource():
    parsed = parse_permission("edit.forex.transaction")
    assert parsed.action == "edit"
    assert parsed.resource == "forex.transaction"


@pytest.mark.parametrize("name", ["", "view", "fly.user", "view.User", "view..user"])
def test_parse_rejects_malformed(name):
    with pytest.raises(ValueError):
        parse_permission(name)


def test_super_admin_passes_everything():
    admin = Principal(user_id="1", role_name=SUPER_ADMIN_ROLE)
    assert has_permission(admin, "delete.ico.offer")


def test_exact_membership_required():
    editor = Principal(user_id="2", role_name="Editor", permissions=frozenset({"view.faq"}))
    assert has_permission(editor, "view.faq")
    assert not has_permission(editor, "edit.faq")
    assert not has_permission(editor, "view.faq.page")


def test_no_requirement_always_passes():
    assert has_permission(Principal(user_id="3"), None)


def test_crud_permissions():
    assert crud_permissions("blog.post") == {
        "view": "view.blog.post",
        "create": "create.blog.post",
        "edit": "edit.blog.post",
        "delete": "delete.blog.post",
    }
