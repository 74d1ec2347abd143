"""
Exceptions raised by plan validation.
"""

from __future__ import annotations

_MAX_LISTED = 10


class PlanValidationError(Exception):
    """
    Raised by ``validate_plan(..., raise_on_error=True)`` on a failing plan.

    The message names the plan, counts the errors and lists the first
    offending records with their messages, so a CLI can print it as is.

    Attributes:
        plan_id: Id of the plan that failed validation
        report: The failing ``ValidationReport``
    """

    def __init__(self, plan_id: str, report) -> None:
        self.plan_id = plan_id
        self.report = report
        super().__init__(self._summary())

    @property
    def problem_ids(self) -> list[str]:
        """Distinct ids of the records carrying errors."""
        return self.report.problem_ids

    def _summary(self) -> str:
        errors = self.report.errors
        lines = [f"[Plan {self.plan_id}] {len(errors)} validation error(s)"]
        lines += [f"  {i.entity_id}: {i.message}" for i in errors[:_MAX_LISTED]]
        if len(errors) > _MAX_LISTED:
            lines.append(f"  ... and {len(errors) - _MAX_LISTED} more")
        return "\n".join(lines)
