class GigMatchError(Exception):
    """Base class for errors raised by gig-match."""


class ValidationError(GigMatchError):
    """A single show record is malformed. Recovered locally; the record is dropped."""


class AuthError(GigMatchError):
    """Missing, expired or unrefreshable user credential."""
    status_code = 401


class UpstreamError(GigMatchError):
    """
    Spotify or listings-site failure.
    str() is the generic message safe to show a user; the upstream detail
    is kept on .detail for logging.
    """
    status_code = 500

    def __init__(self, message, detail=None):
        super().__init__(message)
        self.detail = detail


class ResourceError(GigMatchError):
    """Browser launch or navigation failure that ends a scrape run."""
