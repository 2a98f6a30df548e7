"""Error taxonomy — every kind surfaces to the webhook caller as a 400."""


class BridgeError(Exception):
    """Base class for errors that reject a webhook delivery."""


class AuthError(BridgeError):
    pass


class PayloadError(BridgeError):
    pass


class ResolutionError(BridgeError):
    """A component listing or search against the remote API failed."""


class ComponentNotFoundError(ResolutionError):
    def __init__(self, name: str) -> None:
        super().__init__(f"component not found: {name}")
        self.name = name


class UpstreamWriteError(BridgeError):
    """An incident create/update could not be written to the remote API."""
