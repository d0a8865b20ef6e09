"""
Role based access control.

A static table maps each role to the actions it may perform on each
dashboard module. Modules are addressed with dotted names such as
``finance.expenses``. Unknown roles fall back to the most restricted role.
"""

from dataclasses import dataclass, replace
from typing import Dict

ACTIONS = ("view", "create", "edit", "delete")
DEFAULT_ROLE = "storekeeper"


@dataclass(frozen=True)
class ModuleAccess:
    """What a role may do on one module."""
    view: bool = False
    create: bool = False
    edit: bool = False
    delete: bool = False
    hide_totals: bool = True  # hide financial totals and summaries

    def allows(self, action: str) -> bool:
        return getattr(self, action, False) is True


NO_ACCESS = ModuleAccess()
FULL_ACCESS = ModuleAccess(view=True, create=True, edit=True, delete=True, hide_totals=False)
VIEW_ONLY = ModuleAccess(view=True)
# Manage records but never delete them
MANAGE = ModuleAccess(view=True, create=True, edit=True, hide_totals=False)
# View with figures visible
READ = ModuleAccess(view=True, hide_totals=False)

MODULES = (
    "dashboard",
    "companies",
    "users",
    "finance.expenses",
    "finance.income",
    "finance.invoices",
    "finance.quotations",
    "finance.bank_accounts",
    "finance.reports",
    "hr.employees",
    "hr.salaries",
    "marine.vessels",
    "marine.rentals",
    "marine.overhauls",
    "marine.crew",
    "marine.maintenance",
    "scrap.lands",
    "scrap.equipment",
    "equity",
    "sync",
)

ROLE_PERMISSIONS: Dict[str, Dict[str, ModuleAccess]] = {
    "admin": {module: FULL_ACCESS for module in MODULES},

    "hr": {
        "dashboard": VIEW_ONLY,
        "companies": VIEW_ONLY,
        "hr.employees": FULL_ACCESS,
        "hr.salaries": MANAGE,
        "marine.crew": FULL_ACCESS,
    },

    "accountant": {
        "dashboard": READ,
        "companies": VIEW_ONLY,
        "finance.expenses": MANAGE,
        "finance.income": READ,
        "finance.invoices": MANAGE,
        "finance.quotations": MANAGE,
        "finance.bank_accounts": MANAGE,
        "finance.reports": VIEW_ONLY,
        "hr.employees": VIEW_ONLY,
        "hr.salaries": VIEW_ONLY,
        "marine.vessels": READ,
        "marine.rentals": MANAGE,
        "marine.overhauls": READ,
        "marine.maintenance": READ,
        "scrap.lands": READ,
        "scrap.equipment": READ,
        "equity": VIEW_ONLY,
    },

    "storekeeper": {
        "dashboard": VIEW_ONLY,
        "marine.vessels": VIEW_ONLY,
        "marine.rentals": VIEW_ONLY,
        "marine.maintenance": VIEW_ONLY,
        "scrap.lands": VIEW_ONLY,
        "scrap.equipment": replace(MANAGE, hide_totals=True),
    },
}


def normalize_role(role: str) -> str:
    """Map a role name onto a known role, defaulting to the most restricted."""
    normalized = (role or "").lower()
    return normalized if normalized in ROLE_PERMISSIONS else DEFAULT_ROLE


def get_module_access(role: str, module: str) -> ModuleAccess:
    return ROLE_PERMISSIONS[normalize_role(role)].get(module, NO_ACCESS)


def has_permission(role: str, module: str, action: str) -> bool:
    """Check whether ``role`` may perform ``action`` on ``module``."""
    if action not in ACTIONS:
        raise ValueError(f"Unknown action: {action}")
    return get_module_access(role, module).allows(action)


def should_hide_totals(role: str, module: str) -> bool:
    return get_module_access(role, module).hide_totals


def permission_map(role: str) -> Dict[str, Dict[str, bool]]:
    """Resolved permissions for every module, as returned by the profile endpoint."""
    resolved = {}
    for module in MODULES:
        access = get_module_access(role, module)
        resolved[module] = {
            "view": access.view,
            "create": access.create,
            "edit": access.edit,
            "delete": access.delete,
            "hide_totals": access.hide_totals,
        }
    return resolved
