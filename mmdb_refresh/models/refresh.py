from enum import StrEnum


class RefreshOutcome(StrEnum):
    """Result of one refresh routine run that did not raise."""

    SKIPPED = "skipped"
    NOT_MODIFIED = "not_modified"
    UPDATED = "updated"
    UNEXPECTED_STATUS = "unexpected_status"
