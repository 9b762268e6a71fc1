from __future__ import annotations


class InterviewError(Exception):
    pass


class ConfigurationError(InterviewError, ValueError):
    """Invalid interview configuration or engine settings; raised before any question is asked."""


class StateInvariantError(InterviewError, RuntimeError):
    """A step found the turn state mis-sequenced, e.g. no current question."""


class ClassificationFailure(InterviewError):
    """A language-service reply could not be used. Never escapes the adapter."""
