"""Exceptions raised by mention_context."""


class MentionContextError(Exception):
    """Base class for errors surfaced to callers."""


class SettingsError(MentionContextError):
    """A settings file holds values that fail validation."""
