class UpstreamUnavailableError(Exception):
    """An external provider (geocoding, phone verification) could not be reached."""

    def __init__(self, provider: str, detail: str):
        self.provider = provider
        self.detail = detail
        super().__init__(f"{provider} unavailable: {detail}")


class VerificationRejectedError(Exception):
    """The phone verification provider rejected the request (bad code, expired session)."""


class ConflictError(ValueError):
    """A uniqueness constraint on an address field was violated."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Address with {field} {value} already exists")
