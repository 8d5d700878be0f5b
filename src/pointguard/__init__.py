"""pointguard: browse and reveal secrets in a GPG-encrypted password store."""

__version__ = "0.1.0"

DEFAULT_TITLE = "Point Guard Password Store"
SECRET_SUFFIX = ".gpg"


class PointGuardError(Exception):
    """User-facing error.

    Every failure the ``pg`` command can report derives from this class.
    The message is printed to stderr and the process exits with code 1.
    """


class ConfigError(PointGuardError):
    """Invalid configuration file, environment value, or option."""


class NotFound(PointGuardError):
    """Requested name is neither a secret nor a directory in the store."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name} is not in the point guard password store.")
        self.name = name


class DecryptionFailed(PointGuardError):
    """The decryption tool is missing or could not decrypt a secret."""


class InvalidEntryName(PointGuardError):
    """A store entry has no base name or its name is not valid text."""


class ClipboardRelayUnavailable(PointGuardError):
    """The clipboard relay could not be launched or reached."""


class EmptySecretContent(PointGuardError):
    """Decrypted content has no first line to copy."""
