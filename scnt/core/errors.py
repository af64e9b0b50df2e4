"""
Error taxonomy shared by the counting core and its collaborators.
"""


class ScntError(Exception):
    """
    Base exception for source counting errors.
    """


class InvalidInputError(ScntError, ValueError):
    """
    Raised when file contents cannot be classified (e.g. empty contents).
    """


class UnresolvableParserError(ScntError, LookupError):
    """
    Raised when no registered or default parser can handle a file.
    """


class InvalidArgumentError(ScntError, ValueError):
    """
    Raised on configuration mistakes: malformed aliases, unknown options
    or parser ids.
    """


class ArgumentTypeError(InvalidArgumentError, TypeError):
    """
    Raised when a registry or extension operation receives the wrong type.
    """


class FileReadError(ScntError):
    """
    Raised when a file cannot be read safely.
    """
