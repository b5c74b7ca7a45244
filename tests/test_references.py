"""Tests for the reference checker: every id in the model must be declared."""

from rolecheck.checks import ReferenceChecker


def test_clean_model_has_no_dangling_references(clinic_model):
    findings = ReferenceChecker(clinic_model).check()
    assert findings.errors == []
    assert findings.has_role_errors is False


def test_unknown_role_in_permission_map(make_model, clinic_data):
    perms = {**clinic_data["role_permissions"], "ghost": ["patient:read"]}
    findings = ReferenceChecker(make_model(role_permissions=perms)).check()
    assert findings.permissions == ["permission map references unknown role 'ghost'"]
    assert findings.has_role_errors is True


def test_unknown_permission_in_permission_map(make_model, clinic_data):
    perms = {**clinic_data["role_permissions"], "nurse": ["patient:read", "vitals:write", "x:fly"]}
    findings = ReferenceChecker(make_model(role_permissions=perms)).check()
    assert findings.permissions == [
        "permission map for role 'nurse' references unknown permission 'x:fly'"
    ]
    assert findings.has_role_errors is False


def test_unknown_role_specific_permission(make_model, clinic_data):
    specific = {**clinic_data["role_specific_permissions"], "nurse": ["x:fly"]}
    findings = ReferenceChecker(make_model(role_specific_permissions=specific)).check()
    assert findings.permissions == [
        "role-specific permissions for 'nurse' reference unknown permission 'x:fly'"
    ]


def test_matrix_unknown_source_and_target(make_model, clinic_data):
    comm = {**clinic_data["communication"], "ghost": ["admin"]}
    comm["admin"] = ["doctor", "phantom"]
    findings = ReferenceChecker(make_model(communication=comm)).check()
    assert findings.communication == [
        "communication matrix entry 'admin' -> 'phantom' references unknown role 'phantom'",
        "communication matrix references unknown source role 'ghost'",
    ]
    assert findings.delegation == []


def test_delegation_matrix_unknown_target(make_model, clinic_data):
    deleg = {**clinic_data["delegation"], "nurse": ["receptionist", "ghost"]}
    findings = ReferenceChecker(make_model(delegation=deleg)).check()
    assert findings.delegation == [
        "delegation matrix entry 'nurse' -> 'ghost' references unknown role 'ghost'"
    ]


def test_workflow_step_references(make_model):
    workflows = [
        {
            "name": "broken",
            "steps": [{"name": "s1", "role": "ghost", "permission": "x:fly"}],
        }
    ]
    findings = ReferenceChecker(make_model(workflows=workflows)).check()
    assert findings.workflows == [
        "workflow 'broken' step 1 references unknown role 'ghost'",
        "workflow 'broken' step 1 references unknown permission 'x:fly'",
    ]


def test_policy_inputs(make_model):
    findings = ReferenceChecker(
        make_model(
            expected_order=["admin", "ghost"],
            escalation_pairs=[["ghost", "ghost"]],
            should_connect=[["nurse", "phantom"]],
            isolated_roles=["nobody"],
        )
    ).check()
    assert findings.policy == [
        "expected order references unknown role 'ghost'",
        "escalation pair ('ghost', 'ghost') references unknown role 'ghost'",
        "should-connect pair ('nurse', 'phantom') references unknown role 'phantom'",
        "isolated roles reference unknown role 'nobody'",
    ]


def test_errors_grouped_in_fixed_order(make_model, clinic_data):
    comm = {**clinic_data["communication"], "admin": ["ghost"]}
    perms = {**clinic_data["role_permissions"], "ghost": []}
    findings = ReferenceChecker(
        make_model(communication=comm, role_permissions=perms, isolated_roles=["ghost"])
    ).check()
    assert findings.errors == [
        "permission map references unknown role 'ghost'",
        "communication matrix entry 'admin' -> 'ghost' references unknown role 'ghost'",
        "isolated roles reference unknown role 'ghost'",
    ]


def test_self_should_connect_pair_is_warning(make_model):
    findings = ReferenceChecker(make_model(should_connect=[["doctor", "doctor"]])).check()
    assert findings.errors == []
    assert findings.warnings == [
        "should-connect pair ('doctor', 'doctor') names the same role twice and is ignored"
    ]
