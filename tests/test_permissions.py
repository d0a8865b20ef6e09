import pytest

from marine_ops.api.auth.permissions import (
    MODULES,
    has_permission,
    normalize_role,
    permission_map,
    should_hide_totals,
)


def test_admin_has_full_access_everywhere():
    for module in MODULES:
        for action in ("view", "create", "edit", "delete"):
            assert has_permission("admin", module, action)
        assert not should_hide_totals("admin", module)


def test_accountant_manages_expenses_but_cannot_delete():
    assert has_permission("accountant", "finance.expenses", "create")
    assert has_permission("accountant", "finance.expenses", "edit")
    assert not has_permission("accountant", "finance.expenses", "delete")
    assert not has_permission("accountant", "sync", "edit")


def test_storekeeper_sees_no_finance():
    assert not has_permission("storekeeper", "finance.expenses", "view")
    assert not has_permission("storekeeper", "equity", "view")
    assert has_permission("storekeeper", "scrap.equipment", "edit")
    assert should_hide_totals("storekeeper", "scrap.equipment")


def test_dashboard_totals_hidden_per_role():
    assert should_hide_totals("storekeeper", "dashboard")
    assert should_hide_totals("hr", "dashboard")
    assert not should_hide_totals("accountant", "dashboard")


def test_unknown_role_falls_back_to_storekeeper():
    assert normalize_role("Captain") == "storekeeper"
    assert normalize_role("ADMIN") == "admin"
    assert normalize_role(None) == "storekeeper"
    assert has_permission("captain", "scrap.equipment", "create")
    assert not has_permission("captain", "users", "view")


def test_unknown_action_is_rejected():
    with pytest.raises(ValueError):
        has_permission("admin", "dashboard", "approve")


def test_permission_map_covers_every_module():
    resolved = permission_map("hr")

    assert set(resolved) == set(MODULES)
    assert resolved["hr.employees"]["delete"] is True
    assert resolved["hr.salaries"]["delete"] is False
    assert resolved["finance.invoices"] == {
        "view": False, "create": False, "edit": False, "delete": False, "hide_totals": True,
    }
