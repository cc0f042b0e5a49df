class CmsGraphError(Exception):
    """
    Base exception for cmsgraph failures raised at the runtime boundary.
    """

    pass


class SchemaModelError(CmsGraphError):
    """
    Raised when a custom-type or shared-slice model cannot be read.
    """

    pass


class DocumentShapeError(CmsGraphError):
    """
    Raised when a document lacks the keys needed to identify it.
    """

    pass


class ConfigurationError(CmsGraphError):
    """
    Raised when runtime configuration is missing or invalid.
    """

    pass
