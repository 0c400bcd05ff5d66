class FormatError(ValueError):
    """A date or amount in a statement row could not be parsed."""


class MissingInputError(Exception):
    """No statements to import, or a statement/store file could not be read."""


class IntegrityWarning(UserWarning):
    """The merged store contains duplicate transaction ids."""
