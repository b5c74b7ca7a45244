"""Shared test fixtures for rolecheck."""

import copy

import pytest

from rolecheck.config.models import ValidatorConfig
from rolecheck.model import DEFAULT_MODEL, RBACModel
from rolecheck.validator import RoleInterconnectionValidator

# A small, fully consistent clinic: no errors, no warnings, every metric at 100.
CLINIC = {
    "roles": [
        {"id": "admin", "label": "Administrator", "rank": 100},
        {"id": "doctor", "label": "Doctor", "rank": 80},
        {"id": "nurse", "label": "Nurse", "rank": 60},
        {"id": "receptionist", "label": "Receptionist", "rank": 40},
    ],
    "permission_catalog": [
        "patient:read",
        "patient:write",
        "vitals:write",
        "appointment:check_in",
        "staff:manage",
        "consultation:start",
    ],
    "role_permissions": {
        "admin": ["staff:manage", "patient:read", "patient:write"],
        "doctor": ["patient:read", "patient:write", "consultation:start"],
        "nurse": ["patient:read", "vitals:write"],
        "receptionist": ["patient:read", "appointment:check_in"],
    },
    "communication": {
        "admin": ["doctor", "nurse", "receptionist"],
        "doctor": ["admin", "nurse"],
        "nurse": ["doctor", "receptionist"],
        "receptionist": ["nurse", "admin"],
    },
    "delegation": {
        "admin": ["doctor"],
        "doctor": ["nurse"],
        "nurse": ["receptionist"],
        "receptionist": [],
    },
    "workflows": [
        {
            "name": "intake",
            "description": "Walk-in patient to consultation",
            "steps": [
                {"name": "check_in", "role": "receptionist", "permission": "appointment:check_in"},
                {"name": "triage", "role": "nurse", "permission": "vitals:write"},
                {"name": "consult", "role": "doctor", "permission": "consultation:start"},
            ],
        }
    ],
    "expected_order": ["admin", "doctor", "nurse", "receptionist"],
    "escalation_pairs": [["admin", "doctor"], ["doctor", "nurse"]],
    "role_specific_permissions": {
        "doctor": ["consultation:start"],
        "nurse": ["vitals:write"],
        "receptionist": ["appointment:check_in"],
    },
    "should_connect": [["receptionist", "nurse"], ["nurse", "doctor"], ["doctor", "admin"]],
}


@pytest.fixture
def clinic_data():
    """Raw mapping for the small clinic model, safe to mutate per test."""
    return copy.deepcopy(CLINIC)


@pytest.fixture
def make_model(clinic_data):
    """Build an RBACModel from the clinic data with top-level keys overridden."""

    def _make(**overrides) -> RBACModel:
        return RBACModel.model_validate({**clinic_data, **overrides})

    return _make


@pytest.fixture
def clinic_model(make_model):
    return make_model()


@pytest.fixture
def sample_config():
    return ValidatorConfig()


@pytest.fixture
def clinic_validator(clinic_model, sample_config):
    return RoleInterconnectionValidator(clinic_model, sample_config)


@pytest.fixture
def default_validator():
    return RoleInterconnectionValidator(DEFAULT_MODEL)
