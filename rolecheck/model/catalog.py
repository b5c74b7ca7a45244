"""Built-in authorization model for the hospital staff application.

These are read-only module exports. The validator never reads them implicitly;
callers pass ``DEFAULT_MODEL`` (or their own ``RBACModel``) explicitly.
"""

from __future__ import annotations

from types import MappingProxyType

from rolecheck.model.types import RBACModel, Role, Step, Workflow

# Role hierarchy, most privileged first.
ROLE_HIERARCHY: tuple[Role, ...] = (
    Role(id="admin", label="Administrator", rank=80,
         description="Hospital administration and staff management"),
    Role(id="doctor", label="Doctor", rank=70,
         description="Patient consultations and medical care"),
    Role(id="nurse", label="Nurse", rank=60,
         description="Patient care and vital monitoring"),
    Role(id="receptionist", label="Receptionist", rank=50,
         description="Appointments and patient coordination"),
    Role(id="pharmacist", label="Pharmacist", rank=40,
         description="Medication dispensing and inventory"),
    Role(id="lab_technician", label="Lab Technician", rank=30,
         description="Laboratory testing and results"),
    Role(id="patient", label="Patient", rank=10,
         description="Access to personal health records"),
)

PERMISSION_CATALOG: tuple[str, ...] = (
    # Patient management
    "patient:read", "patient:write", "patient:delete",
    # Appointments
    "appointment:read", "appointment:write", "appointment:delete", "appointment:check_in",
    # Consultations
    "consultation:read", "consultation:write", "consultation:start",
    # Prescriptions
    "prescription:read", "prescription:write", "prescription:dispense",
    # Laboratory
    "lab:read", "lab:write", "lab:process", "lab:upload_results",
    # Pharmacy
    "pharmacy:read", "pharmacy:write", "pharmacy:dispense", "pharmacy:inventory",
    # Billing
    "billing:read", "billing:write", "billing:process", "billing:invoice",
    # Staff
    "staff:read", "staff:write", "staff:manage", "staff:invite",
    # Settings
    "settings:read", "settings:write", "hospital:settings",
    # Reports
    "reports:read", "reports:generate",
    # Queue
    "queue:read", "queue:write", "queue:manage",
    # Vitals
    "vitals:read", "vitals:write",
    # Inventory
    "inventory:read", "inventory:write", "inventory:manage",
    # Telemedicine
    "telemedicine:read", "telemedicine:write",
    # Workflow
    "workflow:read", "workflow:manage",
    # Activity logs
    "activity_logs:read",
    # Patient portal
    "portal:access",
    # Admin-only
    "system:maintenance", "audit:logs", "compliance:reports",
)

ROLE_PERMISSIONS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "admin": (
        "staff:read", "staff:write", "staff:manage", "staff:invite",
        "settings:read", "settings:write", "hospital:settings",
        "reports:read", "reports:generate",
        "workflow:read", "workflow:manage",
        "activity_logs:read",
        "system:maintenance", "audit:logs", "compliance:reports",
        "patient:read", "patient:write", "patient:delete",
        "appointment:read", "appointment:write", "appointment:delete", "appointment:check_in",
        "consultation:read",
        "lab:read",
        "pharmacy:read", "pharmacy:write",
        "billing:read", "billing:write", "billing:process", "billing:invoice",
        "queue:read", "queue:write", "queue:manage",
        "inventory:read", "inventory:write",
    ),
    "doctor": (
        "patient:read", "patient:write",
        "appointment:read", "appointment:write",
        "consultation:read", "consultation:write", "consultation:start",
        "prescription:read", "prescription:write",
        "lab:read", "lab:write",
        "pharmacy:read",
        "queue:read",
        "vitals:read",
        "telemedicine:read", "telemedicine:write",
        "reports:read",
        "settings:read",
    ),
    "nurse": (
        "patient:read", "patient:write",
        "appointment:read", "appointment:write", "appointment:check_in",
        "consultation:read",
        "queue:read", "queue:write", "queue:manage",
        "vitals:read", "vitals:write",
        "pharmacy:read", "pharmacy:dispense",
        "lab:read",
        "inventory:read",
        "settings:read",
    ),
    "receptionist": (
        "patient:read", "patient:write",
        "appointment:read", "appointment:write", "appointment:check_in",
        "queue:read", "queue:write", "queue:manage",
        "billing:read", "billing:process", "billing:invoice",
        "settings:read",
    ),
    "pharmacist": (
        "patient:read",
        "prescription:read", "prescription:write", "prescription:dispense",
        "pharmacy:read", "pharmacy:write", "pharmacy:dispense", "pharmacy:inventory",
        "inventory:read", "inventory:write", "inventory:manage",
        "consultation:read",
        "settings:read",
    ),
    "lab_technician": (
        "patient:read",
        "lab:read", "lab:write", "lab:process", "lab:upload_results",
        "consultation:read",
        "settings:read",
    ),
    "patient": (
        "portal:access",
        "appointment:read",
        "prescription:read",
        "lab:read",
        "billing:read",
        "vitals:read",
    ),
})

ROLE_COMMUNICATION_MATRIX: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "admin": ("doctor", "nurse", "receptionist", "pharmacist", "lab_technician", "patient"),
    "doctor": ("admin", "nurse", "receptionist", "pharmacist", "lab_technician", "patient"),
    "nurse": ("admin", "doctor", "receptionist", "pharmacist", "lab_technician", "patient"),
    "receptionist": ("admin", "nurse", "doctor", "pharmacist", "lab_technician", "patient"),
    "pharmacist": ("admin", "doctor", "nurse", "receptionist", "lab_technician", "patient"),
    "lab_technician": ("admin", "doctor", "nurse", "receptionist", "pharmacist"),
    "patient": ("admin", "doctor", "nurse", "receptionist", "pharmacist"),
})

TASK_DELEGATION_MATRIX: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "admin": ("doctor", "nurse", "receptionist", "pharmacist", "lab_technician"),
    "doctor": ("nurse", "receptionist", "pharmacist", "lab_technician"),
    "nurse": ("receptionist",),
    "receptionist": (),
    "pharmacist": (),
    "lab_technician": (),
    "patient": (),
})

CROSS_ROLE_WORKFLOWS: tuple[Workflow, ...] = (
    Workflow(
        name="patient-journey",
        description="Complete patient flow from check-in to treatment",
        steps=(
            Step(name="check_in", role="receptionist", permission="appointment:check_in"),
            Step(name="triage", role="nurse", permission="vitals:write"),
            Step(name="consultation", role="doctor", permission="consultation:start"),
            Step(name="lab_order", role="doctor", permission="lab:write"),
            Step(name="lab_processing", role="lab_technician", permission="lab:process"),
            Step(name="results_ready", role="lab_technician", permission="lab:upload_results"),
            Step(name="prescription", role="doctor", permission="prescription:write"),
            Step(name="medication_dispensed", role="pharmacist", permission="pharmacy:dispense"),
            Step(name="follow_up_scheduled", role="receptionist", permission="appointment:write"),
        ),
    ),
    Workflow(
        name="emergency-response",
        description="Urgent patient care workflow",
        steps=(
            Step(name="urgent_triage", role="receptionist", permission="queue:manage"),
            Step(name="urgent_assessment", role="nurse", permission="vitals:write"),
            Step(name="urgent_consultation", role="doctor", permission="consultation:start"),
            Step(name="stat_lab_order", role="doctor", permission="lab:write"),
            Step(name="stat_prescription", role="doctor", permission="prescription:write"),
            Step(name="escalation", role="admin", permission="staff:manage"),
        ),
    ),
    Workflow(
        name="billing",
        description="Patient billing and payment processing",
        steps=(
            Step(name="consultation_complete", role="doctor", permission="consultation:write"),
            Step(name="invoice_issued", role="receptionist", permission="billing:invoice"),
            Step(name="payment_collected", role="receptionist", permission="billing:process"),
            Step(name="reconciliation", role="admin", permission="billing:write"),
        ),
    ),
    Workflow(
        name="pharmacy-dispensing",
        description="Prescription from order to patient pickup",
        steps=(
            Step(name="prescribe", role="doctor", permission="prescription:write"),
            Step(name="verify", role="pharmacist", permission="prescription:read"),
            Step(name="dispense", role="pharmacist", permission="pharmacy:dispense"),
            Step(name="pickup", role="patient", permission="portal:access"),
        ),
    ),
    Workflow(
        name="lab-turnaround",
        description="Lab order, processing and result review",
        steps=(
            Step(name="order", role="doctor", permission="lab:write"),
            Step(name="process", role="lab_technician", permission="lab:process"),
            Step(name="upload_results", role="lab_technician", permission="lab:upload_results"),
            Step(name="review", role="doctor", permission="lab:read"),
            Step(name="notify_patient", role="patient", permission="lab:read"),
        ),
    ),
)

# Permissions a role legitimately holds without its superior holding them.
ROLE_SPECIFIC_PERMISSIONS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "doctor": ("consultation:start", "prescription:write"),
    "nurse": ("vitals:write", "appointment:check_in"),
    "pharmacist": ("pharmacy:dispense", "pharmacy:inventory"),
    "lab_technician": ("lab:process", "lab:upload_results"),
    "receptionist": ("billing:process", "billing:invoice"),
    "patient": ("portal:access",),
})

ESCALATION_PAIRS: tuple[tuple[str, str], ...] = (
    ("admin", "receptionist"),
    ("doctor", "lab_technician"),
)

SHOULD_CONNECT: tuple[tuple[str, str], ...] = (
    ("receptionist", "nurse"),
    ("nurse", "doctor"),
    ("doctor", "lab_technician"),
    ("doctor", "pharmacist"),
    ("pharmacist", "patient"),
    ("doctor", "receptionist"),
    ("doctor", "admin"),
    ("receptionist", "admin"),
    ("lab_technician", "receptionist"),
    ("pharmacist", "receptionist"),
    ("doctor", "patient"),
)

DEFAULT_MODEL = RBACModel(
    roles=ROLE_HIERARCHY,
    permission_catalog=PERMISSION_CATALOG,
    role_permissions=ROLE_PERMISSIONS,
    communication=ROLE_COMMUNICATION_MATRIX,
    delegation=TASK_DELEGATION_MATRIX,
    workflows=CROSS_ROLE_WORKFLOWS,
    expected_order=tuple(r.id for r in ROLE_HIERARCHY),
    escalation_pairs=ESCALATION_PAIRS,
    role_specific_permissions=ROLE_SPECIFIC_PERMISSIONS,
    should_connect=SHOULD_CONNECT,
    isolated_roles=("patient",),
)
