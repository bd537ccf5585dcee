"""Provisioning result models."""

from dataclasses import dataclass
from enum import Enum


class ProvisioningStep(Enum):
    """Ordered steps of a provisioning run."""

    VALIDATE = "validate"
    INSTALL = "install"
    STAGE = "stage"
    UPLOAD = "upload"
    EXECUTE = "execute"

    @property
    def description(self) -> str:
        """Human-readable step name used in failure messages."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ProvisioningStep.VALIDATE: "Validating configuration",
    ProvisioningStep.INSTALL: "Installing Puppet",
    ProvisioningStep.STAGE: "Creating remote staging directory",
    ProvisioningStep.UPLOAD: "Uploading modules",
    ProvisioningStep.EXECUTE: "Running Puppet",
}


@dataclass
class ProvisioningResult:
    """Terminal state of a provisioning run.

    Either succeeded, or failed at exactly one step with the first error
    encountered.
    """

    success: bool
    step: ProvisioningStep | None = None
    error: Exception | None = None

    @classmethod
    def succeeded(cls) -> "ProvisioningResult":
        return cls(success=True)

    @classmethod
    def failed(
        cls, step: ProvisioningStep, error: Exception
    ) -> "ProvisioningResult":
        return cls(success=False, step=step, error=error)

    @property
    def message(self) -> str:
        """One-line summary of the outcome."""
        if self.success:
            return "Provisioning succeeded"
        if self.step is None:
            raise ValueError("Failed result has no step")
        return f"{self.step.description} failed: {self.error}"
