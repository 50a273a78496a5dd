class VaultError(Exception):
    """Base class for every failure the vault surfaces to a user.

    Each subclass carries the HTTP status it maps to and a short message that
    is safe to show in a notification.
    """

    status_code = 500
    default_message = 'Something went wrong'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(VaultError):
    status_code = 401
    default_message = 'Unauthorized'


class NotFound(VaultError):
    status_code = 404
    default_message = 'Entry not found'


class ValidationFailure(VaultError):
    status_code = 400
    default_message = 'Invalid data'


class PersistenceFailure(VaultError):
    status_code = 500
    default_message = 'Storage is unavailable'


class TransformFailure(VaultError):
    # Raised by the client when a key is missing or not a number
    status_code = 400
    default_message = 'Key must be a number'


class ConfigError(Exception):
    # Missing startup configuration; the server must not start
    pass
