"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    kind = "domain"

    @property
    def message(self) -> str:
        return str(self)


class InvalidOperationError(DomainException):
    """Operation rejected before any mutation (e.g. moving the Initial Balance)"""

    kind = "validation"


class TransactionNotFoundError(DomainException):
    """Referenced transaction is not present in any week"""

    kind = "not_found"


class WeekNotFoundError(DomainException):
    """No week matches the requested target date"""

    kind = "not_found"


class ScenarioNotFoundError(DomainException):
    """Scenario does not exist"""

    kind = "not_found"


class ScenarioLockedError(DomainException):
    """Scenario is locked and cannot take overrides"""

    kind = "conflict"


class ScenarioFetchError(DomainException):
    """Scenario API returned an error or is unavailable"""

    kind = "upstream"


class OverrideSubmitError(DomainException):
    """Scenario API rejected an override submission"""

    kind = "upstream"


class ScenarioNotLockedError(DomainException):
    """Operation needs a Locked scenario (e.g. export)"""

    kind = "forbidden"
