"""
Exception classes for the HTTP Signatures SDK
"""

from typing import Optional, Dict, Any


class HttpSignaturesError(Exception):
    """Base exception for all HTTP Signatures SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class AlgorithmError(HttpSignaturesError):
    """Exception raised for unsupported algorithms or unusable key material"""

    def __init__(self, message: str, error_code: str = "ALGORITHM_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class CryptoKeyError(HttpSignaturesError):
    """Exception raised for ambiguous, invalid or conflicting key material"""

    def __init__(self, message: str, error_code: str = "KEY_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class KeyStoreError(HttpSignaturesError):
    """Exception raised for unknown or duplicate key ids"""

    def __init__(self, message: str, error_code: str = "KEY_STORE_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class HeaderError(HttpSignaturesError):
    """Exception raised for missing or duplicate signature headers and unsupported pseudo-headers"""

    def __init__(self, message: str, error_code: str = "HEADER_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class SignedHeaderNotPresentError(HttpSignaturesError):
    """Exception raised when a header named in the header list is absent from the message"""

    def __init__(self, message: str, error_code: str = "SIGNED_HEADER_NOT_PRESENT", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class SignatureParseError(HttpSignaturesError):
    """Exception raised for malformed signature parameters"""

    def __init__(self, message: str, error_code: str = "SIGNATURE_PARSE_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class DigestError(HttpSignaturesError):
    """Exception raised for unsupported digest specs or malformed Digest headers"""

    def __init__(self, message: str, error_code: str = "DIGEST_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class SignatureDatesError(HttpSignaturesError):
    """Exception raised when created/expires fall outside the allowed window"""

    def __init__(self, message: str, error_code: str = "SIGNATURE_DATES_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ContextError(HttpSignaturesError):
    """Exception raised for inconsistent signing context settings"""

    def __init__(self, message: str, error_code: str = "CONTEXT_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ConfigError(HttpSignaturesError):
    """Exception raised for configuration loading and validation errors"""

    def __init__(self, message: str, error_code: str = "CONFIG_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
