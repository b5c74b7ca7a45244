"""Tests for the validator facade and role summaries."""

import logging

from rolecheck import (
    DEFAULT_MODEL,
    RoleInterconnectionValidator,
    calculate_interconnection_metrics,
    get_all_role_summaries,
    get_role_permission_summary,
    validate_all_workflows,
    validate_role_interconnections,
)
from rolecheck.config.models import ValidatorConfig
from rolecheck.model import RBACModel, Role


class TestValidateRoleInterconnections:
    def test_clean_model(self, clinic_validator):
        result = clinic_validator.validate_role_interconnections()
        assert result.valid is True
        assert all(result.details.model_dump().values())
        assert result.errors == []
        assert result.warnings == []

    def test_minimal_intake_model_end_to_end(self):
        model = RBACModel.model_validate(
            {
                "roles": [
                    {"id": "admin", "rank": 100},
                    {"id": "doctor", "rank": 80},
                    {"id": "nurse", "rank": 60},
                    {"id": "receptionist", "rank": 40},
                ],
                "permission_catalog": ["register_patient", "record_vitals", "start_consultation"],
                "role_permissions": {
                    "admin": ["register_patient"],
                    "doctor": ["start_consultation"],
                    "nurse": ["record_vitals"],
                    "receptionist": ["register_patient"],
                },
                "communication": {
                    "receptionist": ["nurse"],
                    "nurse": ["doctor"],
                    "doctor": ["admin"],
                },
                "delegation": {"doctor": ["nurse"]},
                "workflows": [
                    {
                        "name": "intake",
                        "steps": [
                            {"name": "check-in", "role": "receptionist", "permission": "register_patient"},
                            {"name": "triage", "role": "nurse", "permission": "record_vitals"},
                            {"name": "consult", "role": "doctor", "permission": "start_consultation"},
                        ],
                    }
                ],
                "escalation_pairs": [["doctor", "nurse"]],
                "role_specific_permissions": {"nurse": ["record_vitals"]},
                "should_connect": [["receptionist", "nurse"], ["nurse", "doctor"], ["doctor", "admin"]],
            }
        )
        validator = RoleInterconnectionValidator(model)
        result = validator.validate_role_interconnections()
        assert result.valid is True
        assert result.errors == []
        m = validator.calculate_interconnection_metrics()
        for name in ("interconnection_coverage", "permission_consistency",
                     "workflow_completeness", "security_compliance"):
            assert getattr(m, name) == 100.0
        assert m.overall_health_score == 100.0

    def test_default_model(self, default_validator):
        result = default_validator.validate_role_interconnections()
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_empty_model_is_valid(self):
        result = RoleInterconnectionValidator(RBACModel()).validate_role_interconnections()
        assert result.valid is True
        assert result.errors == []

    def test_upward_delegation(self, make_model, clinic_data):
        deleg = {**clinic_data["delegation"], "receptionist": ["admin"]}
        validator = RoleInterconnectionValidator(make_model(delegation=deleg))
        result = validator.validate_role_interconnections()
        assert result.valid is False
        assert result.details.delegation_matrix_valid is False
        assert result.details.hierarchy_valid is True
        assert result.errors == [
            "delegation 'receptionist' (rank 40) -> 'admin' (rank 100) delegates upward"
        ]
        m = validator.calculate_interconnection_metrics()
        assert m.security_compliance == 75.0
        assert m.overall_health_score == 93.75

    def test_broken_handoff_flags_workflows(self, make_model, clinic_data):
        comm = {**clinic_data["communication"], "receptionist": ["admin"]}
        result = RoleInterconnectionValidator(make_model(communication=comm)).validate_role_interconnections()
        assert result.valid is False
        assert result.details.workflow_paths_valid is False
        assert result.details.communication_paths_valid is True
        assert result.errors == [
            "workflow 'intake' step 2: no communication path from 'receptionist' to 'nurse'"
        ]

    def test_unknown_permission_flags_permissions(self, make_model, clinic_data):
        perms = {**clinic_data["role_permissions"], "admin": ["staff:manage", "patient:read", "patient:write", "x:fly"]}
        result = RoleInterconnectionValidator(make_model(role_permissions=perms)).validate_role_interconnections()
        assert result.details.permissions_consistent is False
        assert result.details.hierarchy_valid is True
        assert result.errors == ["permission map for role 'admin' references unknown permission 'x:fly'"]

    def test_dangling_matrix_role(self, make_model, clinic_data):
        comm = {**clinic_data["communication"], "admin": ["doctor", "nurse", "receptionist", "ghost"]}
        result = RoleInterconnectionValidator(make_model(communication=comm)).validate_role_interconnections()
        assert result.valid is False
        assert result.details.communication_paths_valid is False
        assert result.details.hierarchy_valid is False

    def test_dangling_workflow_reference_reported_once(self, make_model):
        workflows = [{"name": "w", "steps": [{"name": "s", "role": "ghost", "permission": "patient:read"}]}]
        result = RoleInterconnectionValidator(make_model(workflows=workflows)).validate_role_interconnections()
        msg = "workflow 'w' step 1 references unknown role 'ghost'"
        assert result.errors.count(msg) == 1
        assert result.details.workflow_paths_valid is False

    def test_error_order_follows_checkers(self, make_model, clinic_data):
        deleg = {**clinic_data["delegation"], "receptionist": ["admin"]}
        model = make_model(
            delegation=deleg,
            expected_order=["admin", "ghost"],
            roles=[*clinic_data["roles"], {"id": "intern", "rank": 40}],
            isolated_roles=["intern"],
        )
        result = RoleInterconnectionValidator(model).validate_role_interconnections()
        assert result.errors == [
            "expected order references unknown role 'ghost'",
            "role hierarchy: multiple roles share the bottom rank 40: 'receptionist', 'intern'",
            "delegation 'receptionist' (rank 40) -> 'admin' (rank 100) delegates upward",
        ]

    def test_idempotent(self, clinic_validator):
        first = clinic_validator.validate_role_interconnections()
        second = clinic_validator.validate_role_interconnections()
        assert first == second
        assert first is not second

    def test_deterministic_across_instances(self, make_model, clinic_data):
        deleg = {**clinic_data["delegation"], "receptionist": ["admin"]}
        model = make_model(delegation=deleg)
        a = RoleInterconnectionValidator(model).validate_role_interconnections()
        b = RoleInterconnectionValidator(model).validate_role_interconnections()
        assert a.model_dump() == b.model_dump()

    def test_logs_summary_line(self, clinic_validator, caplog):
        caplog.set_level(logging.INFO, logger="rolecheck.validator")
        clinic_validator.validate_role_interconnections()
        assert "validated 4 role(s), 1 workflow(s): valid" in caplog.text


class TestWorkflowResults:
    def test_default_workflows_all_valid(self, default_validator):
        results = default_validator.validate_all_workflows()
        assert [r.workflow_name for r in results] == [
            "patient-journey",
            "emergency-response",
            "billing",
            "pharmacy-dispensing",
            "lab-turnaround",
        ]
        assert all(r.valid for r in results)

    def test_results_are_copies(self, clinic_validator):
        first = clinic_validator.validate_all_workflows()
        first[0].errors.append("mutated")
        assert clinic_validator.validate_all_workflows()[0].errors == []


class TestRoleSummaries:
    def test_summary(self, clinic_validator):
        s = clinic_validator.get_role_permission_summary("nurse")
        assert s.label == "Nurse"
        assert s.rank == 60
        assert s.permission_count == 2
        assert s.categories == ["patient", "vitals"]
        assert s.can_communicate_with == ["doctor", "receptionist"]
        assert s.can_be_contacted_by == ["admin", "doctor", "receptionist"]
        assert s.can_delegate_to == ["receptionist"]
        assert s.can_receive_from == ["doctor"]

    def test_unknown_role_is_none(self, clinic_validator):
        assert clinic_validator.get_role_permission_summary("ghost") is None
        assert clinic_validator.get_communication_partners("ghost") is None

    def test_label_falls_back_to_id(self):
        model = RBACModel(roles=(Role(id="solo", rank=1),))
        assert RoleInterconnectionValidator(model).get_role_permission_summary("solo").label == "solo"

    def test_all_summaries_ordered_by_rank(self, default_validator):
        roles = [s.role for s in default_validator.get_all_role_summaries()]
        assert roles == [
            "admin",
            "doctor",
            "nurse",
            "receptionist",
            "pharmacist",
            "lab_technician",
            "patient",
        ]

    def test_rank_ties_keep_declaration_order(self):
        model = RBACModel(roles=(Role(id="x", rank=10), Role(id="y", rank=50), Role(id="z", rank=50)))
        roles = [s.role for s in RoleInterconnectionValidator(model).get_all_role_summaries()]
        assert roles == ["y", "z", "x"]

    def test_summaries_only_name_declared_roles(self, make_model, clinic_data):
        comm = {**clinic_data["communication"], "ghost": ["admin"], "admin": ["doctor", "phantom"]}
        validator = RoleInterconnectionValidator(make_model(communication=comm))
        declared = set(validator.model.role_ids)
        for s in validator.get_all_role_summaries():
            for names in (s.can_communicate_with, s.can_be_contacted_by, s.can_delegate_to, s.can_receive_from):
                assert set(names) <= declared

    def test_communication_partners(self, clinic_validator):
        p = clinic_validator.get_communication_partners("admin")
        assert p.can_communicate_with == ["doctor", "nurse", "receptionist"]
        assert p.can_be_contacted_by == ["doctor", "receptionist"]

    def test_workflow_path(self, clinic_validator):
        path = clinic_validator.get_workflow_path("intake")
        assert path.roles == ["receptionist", "nurse", "doctor"]
        assert [s.name for s in path.steps] == ["check_in", "triage", "consult"]
        assert clinic_validator.get_workflow_path("nope") is None


class TestModuleFunctions:
    def test_defaults_to_builtin_model(self):
        assert validate_role_interconnections().valid is True
        assert calculate_interconnection_metrics().overall_health_score == 100.0
        assert len(validate_all_workflows()) == len(DEFAULT_MODEL.workflows)
        assert len(get_all_role_summaries()) == len(DEFAULT_MODEL.roles)

    def test_explicit_model_and_config(self, clinic_model):
        cfg = ValidatorConfig(vacuous_policy="exclude")
        summary = get_role_permission_summary("doctor", model=clinic_model, config=cfg)
        assert summary.can_delegate_to == ["nurse"]
        assert get_role_permission_summary("pharmacist", model=clinic_model) is None
