from .model import ProvisionConfig, ReviewConfig, MakeConfig, validate_config, review_categories
from .runner import CommandRunner, CIError, StepFailure, run_steps
from .step_workflows.provision import ProvisionStep
from .step_workflows.review import ReviewStep, review_targets
from .step_workflows.make import MakeStep

__all__ = [
    "ProvisionConfig", "ReviewConfig", "MakeConfig", "validate_config", "review_categories",
    "CommandRunner", "CIError", "StepFailure", "run_steps",
    "ProvisionStep", "ReviewStep", "review_targets", "MakeStep",
]
