class HealthAccessError(Exception):
    """Base exception for healthaccess"""
    pass

class MissingInputError(HealthAccessError):
    """Raised when a required input collection is absent or empty"""
    pass

class CRSMismatchError(HealthAccessError):
    """Raised when a layer has no CRS, a geographic CRS where a planar one is needed, or a CRS that differs from its partner layer"""
    pass

class DataSchemaError(HealthAccessError):
    """Raised when data does not match expected schema"""
    pass

class DataQualityWarning(UserWarning):
    """Emitted for per-record problems that are excluded from the run instead of aborting it"""
    pass
