"""Pytest configuration for the flowforge test suite."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from flowforge.container import reset_container
from flowforge.domains.shared import Action, ActionTarget


@pytest.fixture(autouse=True)
def _fresh_container():
    """Every test starts from an unbuilt service container."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def login_actions() -> List[Action]:
    """Username, password and a Login button click."""
    return [
        Action.create("fill", ActionTarget.role("textbox", "Username"), ["bob"]),
        Action.create("fill", ActionTarget.role("textbox", "Password"), ["secret123"]),
        Action.create("click", ActionTarget.role("button", "Login")),
    ]


@pytest.fixture
def wrapper_clicks() -> List[Action]:
    """Two clicks on a layout wrapper without any accessible role."""
    return [
        Action.create("click", ActionTarget.css("#wrapper")),
        Action.create("click", ActionTarget.css("#wrapper")),
    ]


@pytest.fixture
def admin_session() -> List[Action]:
    """Login, navigation into the Admin module, a search and a logout."""
    return [
        Action.create(
            "goto", type="navigation", args=["https://hr.example.com/web/index.php/auth/login"]
        ),
        Action.create("fill", ActionTarget.role("textbox", "Username"), ["Admin"]),
        Action.create("fill", ActionTarget.role("textbox", "Password"), ["admin123"]),
        Action.create("click", ActionTarget.role("button", "Login")),
        Action.create("click", ActionTarget.role("link", "Admin")),
        Action.create("fill", ActionTarget.role("textbox", "Search"), ["Linda"]),
        Action.create("click", ActionTarget.role("button", "Search")),
        Action.create(
            "toBeVisible",
            ActionTarget.role("heading", "System Users"),
            type="assertion",
        ),
        Action.create("click", ActionTarget.role("button", "Logout")),
    ]


@pytest.fixture
def login_payload() -> List[Dict[str, Any]]:
    """The login recording in its JSON form."""
    return [
        {
            "type": "fill",
            "method": "fill",
            "target": {"type": "getByRole", "selector": "textbox", "options": {"name": "Username"}},
            "args": ["bob"],
        },
        {
            "type": "fill",
            "method": "fill",
            "target": {"type": "getByRole", "selector": "textbox", "options": {"name": "Password"}},
            "args": ["secret123"],
        },
        {
            "type": "click",
            "method": "click",
            "target": {"type": "getByRole", "selector": "button", "options": {"name": "Login"}},
            "args": [],
        },
    ]
