from pydantic import BaseModel, Field, model_validator
from typing import Literal


class MetricWeights(BaseModel):
    interconnection_coverage: float = Field(default=0.25, ge=0)
    permission_consistency: float = Field(default=0.25, ge=0)
    workflow_completeness: float = Field(default=0.25, ge=0)
    security_compliance: float = Field(default=0.25, ge=0)

    @model_validator(mode="after")
    def check_total(self) -> "MetricWeights":
        if sum(self.as_dict().values()) <= 0:
            raise ValueError("metric weights must not all be zero")
        return self

    def as_dict(self) -> dict[str, float]:
        return {
            "interconnection_coverage": self.interconnection_coverage,
            "permission_consistency": self.permission_consistency,
            "workflow_completeness": self.workflow_completeness,
            "security_compliance": self.security_compliance,
        }


class HealthThresholds(BaseModel):
    healthy: float = Field(default=80.0, ge=0, le=100)
    attention: float = Field(default=60.0, ge=0, le=100)
    fail_below: float = Field(default=70.0, ge=0, le=100)

    @model_validator(mode="after")
    def check_order(self) -> "HealthThresholds":
        if self.attention > self.healthy:
            raise ValueError("attention threshold cannot exceed healthy threshold")
        return self

    def classify(self, score: float) -> Literal["healthy", "attention", "critical"]:
        """Bucket an unrounded health score."""
        if score >= self.healthy:
            return "healthy"
        if score >= self.attention:
            return "attention"
        return "critical"


class ValidatorConfig(BaseModel):
    weights: MetricWeights = Field(default_factory=MetricWeights)
    thresholds: HealthThresholds = Field(default_factory=HealthThresholds)
    # "full": an empty denominator scores 100; "exclude": drop it from the composite
    vacuous_policy: Literal["full", "exclude"] = "full"
    self_edge_policy: Literal["warn", "allow", "error"] = "warn"
    warn_undelegated_handoffs: bool = False
    log_level: Literal["debug", "info", "warn", "error"] = "info"
