"""Failure types raised by the gateways and the write coordinator.

Gateways translate library exceptions into these at their boundary so the
rest of the service only ever sees one error per stage.
"""


class UsuariosError(Exception):
    """Base class for every failure the service reports to a caller."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class UploadError(UsuariosError):
    """The image host did not confirm the upload."""

    pass


class StoreError(UsuariosError):
    """The relational store rejected or failed a query."""

    pass


class NotFound(UsuariosError):
    """Reserved: a missing id is currently reported as success."""

    pass


class GatewayTimeoutError(UsuariosError):
    """A gateway call did not complete within its configured bound."""

    stage: str = ""


class UploadTimeoutError(GatewayTimeoutError, UploadError):
    stage = "upload"


class StoreTimeoutError(GatewayTimeoutError, StoreError):
    stage = "store"


class BadRequestError(UsuariosError):
    """The request body could not be read."""

    pass
