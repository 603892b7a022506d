"""Quality report models."""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class QualityCheck(BaseModel):
    """Result of one quality rule."""

    label: str = Field(..., description="Human readable rule name")
    passed: bool = Field(..., description="Whether the rule passed")
    current: Union[int, bool] = Field(..., description="Measured value")
    target: Union[int, bool] = Field(..., description="Required value")
    critical: bool = Field(..., description="Whether failing blocks publishing")


class QualityReport(BaseModel):
    """Verdict of the quality gate for one article snapshot."""

    checks: Dict[str, QualityCheck] = Field(..., description="Per-rule results keyed by rule id")
    score: int = Field(..., ge=0, le=100, description="Percentage of rules passed")
    can_publish: bool = Field(..., description="All critical rules passed")

    def failed_critical(self) -> List[str]:
        """Rule ids of failing critical checks."""
        return [rule for rule, check in self.checks.items() if check.critical and not check.passed]

    def failed_advisory(self) -> List[str]:
        """Rule ids of failing non-critical checks."""
        return [rule for rule, check in self.checks.items() if not check.critical and not check.passed]

    def summary(self, rule: Optional[str] = None) -> str:
        """One-line description of the failing checks."""
        parts = []
        for rule_id, check in self.checks.items():
            if check.passed or (rule and rule_id != rule):
                continue
            parts.append(f"{check.label}: {check.current} / {check.target}")
        return "; ".join(parts) if parts else "all checks passed"
