"""
Exception hierarchy for unitctl.

Every failure the core reports to its callers is a `UnitctlError`. Parse
failures mean systemd answered with something we could not decode;
transport failures mean we never got a usable answer at all.
"""


class UnitctlError(Exception):
    """Base exception for unitctl errors."""

    pass


class ParseError(UnitctlError):
    """Malformed reply or text, or an unrecognized type/state token."""

    pass


class UnrecognizedExtensionError(ParseError):
    """Unit file path has no extension or one we do not know."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'Unrecognized unit file extension: {path!r}')


class UnrecognizedStateError(ParseError):
    """State token has a lead character outside the closed state table."""

    def __init__(self, token: str, character: str | None = None) -> None:
        self.token = token
        self.character = character
        super().__init__(
            f'Unrecognized unit state {character!r} in token {token!r}'
        )


class MalformedReplyError(ParseError):
    """Reply or command output does not have the expected shape."""

    pass


class TransportError(UnitctlError):
    """D-Bus or process transport failure."""

    pass


class DBusConnectionError(TransportError):
    """Could not establish a connection to the message bus."""

    pass


class MethodCallError(TransportError):
    """Could not build or dispatch a D-Bus method call."""

    pass


class DBusReplyError(TransportError):
    """The D-Bus peer answered with an error."""

    def __init__(self, method: str, message: str) -> None:
        self.method = method
        super().__init__(f'{method} failed: {message}')


class DBusTimeoutError(DBusReplyError):
    """No reply arrived within the configured timeout."""

    def __init__(self, method: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(method, f'no reply within {timeout:g}s')


class ProcessError(TransportError):
    """An external command could not be spawned or failed."""

    def __init__(
        self,
        argv: tuple[str, ...],
        message: str,
        returncode: int | None = None,
    ) -> None:
        self.argv = argv
        self.returncode = returncode
        super().__init__(f'{" ".join(argv)}: {message}')


class ProcessTimeoutError(ProcessError):
    """An external command did not finish within the configured timeout."""

    def __init__(self, argv: tuple[str, ...], timeout: float) -> None:
        self.timeout = timeout
        super().__init__(argv, f'timed out after {timeout:g}s')


class UnitNotFoundError(UnitctlError):
    """Unit name or index is not present in the current snapshot."""

    def __init__(self, key: str | int) -> None:
        self.key = key
        super().__init__(f'Unit not found: {key!r}')
