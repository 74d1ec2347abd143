"""
Sampolio kind constants (discriminators for tagged records).
"""


class K:
    # === Item types ===
    INCOME = "income"
    EXPENSE = "expense"

    # === Planned item kinds ===
    ONE_OFF = "one-off"
    REPEATING = "repeating"
    RECURRING = "recurring"  # used by projection filters on recurring items

    # === Frequencies ===
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    CUSTOM = "custom"

    # === Line item sources ===
    SRC_RECURRING = "recurring"
    SRC_SALARY = "salary"
    SRC_PLANNED_ONE_OFF = "planned-one-off"
    SRC_PLANNED_REPEATING = "planned-repeating"

    # === Debt schedules ===
    DEBT_AMORTIZED = "amortized"
    DEBT_FIXED_INSTALLMENT = "fixed-installment"

    # === Wealth categories ===
    CASH = "cash"
    INVESTMENT = "investment"
    RECEIVABLE = "receivable"
    DEBT = "debt"

    @classmethod
    def item_types(cls) -> list[str]:
        return [cls.INCOME, cls.EXPENSE]

    @classmethod
    def item_kinds(cls) -> list[str]:
        """Kinds accepted by projection filters."""
        return [cls.RECURRING, cls.ONE_OFF, cls.REPEATING]

    @classmethod
    def frequencies(cls) -> list[str]:
        return [cls.MONTHLY, cls.QUARTERLY, cls.YEARLY, cls.CUSTOM]

    @classmethod
    def repeating_frequencies(cls) -> list[str]:
        """Frequencies allowed on planned repeating items."""
        return [cls.QUARTERLY, cls.YEARLY, cls.CUSTOM]

    @classmethod
    def sources(cls) -> list[str]:
        return [
            cls.SRC_RECURRING,
            cls.SRC_SALARY,
            cls.SRC_PLANNED_ONE_OFF,
            cls.SRC_PLANNED_REPEATING,
        ]

    @classmethod
    def debt_types(cls) -> list[str]:
        return [cls.DEBT_AMORTIZED, cls.DEBT_FIXED_INSTALLMENT]
