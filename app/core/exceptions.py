class FabricLibraryException(Exception):
    """Base exception for the Fabric Library API"""

    pass


class UnauthorizedException(FabricLibraryException):
    """Raised when a Google ID token or application JWT fails validation"""

    pass


class NotFoundException(FabricLibraryException):
    """Raised when resource not found"""

    pass


class ValidationException(FabricLibraryException):
    """Raised for malformed caller input"""

    pass


class ConflictException(FabricLibraryException):
    """Raised when an insert violates a uniqueness constraint"""

    pass


class VerificationError(FabricLibraryException):
    """Raised by the identity verifier when an external assertion is rejected"""

    pass
