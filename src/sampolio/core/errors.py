"""
Error and warning classes for Sampolio.

This module defines the exception raised for invalid configuration and the
warning categories used to surface soft issues to callers.
"""


class ConfigError(Exception):
    """
    Configuration error during plan setup or validation.

    This exception is raised when an entity record cannot be projected because
    its configuration is structurally invalid.

    **Common Causes:**
    - A repeating item without ``first_occurrence``
    - A ``custom`` frequency without a positive ``custom_interval_months``
    - A one-off item carrying frequency fields (or the reverse)
    - A debt without term, amortization rate or explicit payment
    - A horizon longer than the configured maximum

    **Example Usage:**
        ```python
        from sampolio.core.errors import ConfigError
        from sampolio.core.entities import RepeatingItem

        try:
            RepeatingItem(
                id="gym",
                name="Gym",
                type="expense",
                amount=120.0,
                frequency="custom",
                custom_interval_months=0,
                first_occurrence="2026-01",
            )
        except ConfigError as e:
            print(f"Configuration error: {e}")
        ```

    **When to Use:**
    - In entity ``__post_init__`` checks for contradictory fields
    - In ``validate_plan`` when a report is turned into a hard failure
    - When a debt type has no registered schedule
    """

    pass


class SampolioWarning(UserWarning):
    """Warning for Sampolio configuration issues."""


class MixedCurrencyWarning(SampolioWarning):
    """Instruments in different currencies were summed without conversion."""
