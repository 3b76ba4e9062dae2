"""Domain enums for the exporter."""
from enum import Enum


class DetailOutcome(Enum):
    """Result of exporting one catalog entry."""
    EXPORTED = "EXPORTED"
    UNPUBLISHED = "UNPUBLISHED"
    FAILED = "FAILED"


class SkipDecision(Enum):
    """What the pipeline does after a failed entry."""
    CONTINUE = "CONTINUE"
    ABORT = "ABORT"
