"""Error taxonomy shared by providers, services and routes."""


class LeaseBoostError(Exception):
    """Base error; carries the HTTP status the API surfaces it as."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(LeaseBoostError):
    """Malformed or missing request fields."""

    status_code = 400


class NotFound(LeaseBoostError):
    """The upstream answered but had nothing for the query (e.g. unknown address)."""

    status_code = 404


class UpstreamUnavailable(LeaseBoostError):
    """Credential missing, or the upstream HTTP call failed."""

    status_code = 500
