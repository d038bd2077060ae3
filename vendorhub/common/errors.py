"""
Error taxonomy.

Every error the services raise on purpose derives from VendorHubError and
carries the HTTP status the API answers with. A bare VendorHubError is the
"internal" case.
"""


class VendorHubError(Exception):
    """Base class for application errors (HTTP 500)."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(VendorHubError):
    """Credential missing or login rejected."""

    status_code = 401
    default_message = "Access token required"


class Forbidden(VendorHubError):
    """Credential invalid/expired, or role insufficient."""

    status_code = 403
    default_message = "Invalid or expired token"


class NotFound(VendorHubError):
    """Resource absent, or not owned by the caller."""

    status_code = 404
    default_message = "Not found"


class ValidationFailed(VendorHubError):
    status_code = 400
    default_message = "Missing required fields"


class LimitExceeded(VendorHubError):
    status_code = 403
    default_message = "Product limit reached"


class UpstreamFailure(VendorHubError):
    """A call to the Shopify Admin API failed."""

    status_code = 502
    default_message = "Shopify request failed"
