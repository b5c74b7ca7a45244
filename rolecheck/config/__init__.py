from .loader import load_config
from .models import HealthThresholds, MetricWeights, ValidatorConfig

__all__ = [
    "HealthThresholds",
    "MetricWeights",
    "ValidatorConfig",
    "load_config",
]
