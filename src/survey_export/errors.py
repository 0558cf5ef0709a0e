"""Exception hierarchy for survey exports."""


class ExportError(Exception):
    """Base class for terminal export failures."""
    pass


class UnsupportedFormatError(ExportError):
    """Raised when an export format value is not recognised."""
    pass


class EmptySurveyError(ExportError):
    """Raised when a survey has no questions to export."""
    pass


class SchemaError(ExportError):
    """Raised when a survey snapshot payload has a malformed shape."""
    pass


class ExportPermissionError(ExportError):
    """Raised when the requesting user may not export the survey."""
    pass


class EntitlementError(ExportError):
    """Raised when the user's plan does not include the requested format."""
    pass
