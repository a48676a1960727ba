class RemoteCallError(Exception):
    """The completion service could not produce a reply.

    Covers non-2xx HTTP statuses, transport failures and malformed bodies.
    ``str(error)`` is a human-readable cause suitable for showing to the user.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
