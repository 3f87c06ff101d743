class OtpError(Exception):
    """
    Base class for errors raised by otpkit.
    """


class OtpValidationError(OtpError, ValueError):
    """
    Raised when a configuration value or call argument is invalid.

    :param field: name of the offending field or argument
    :param reason: what is wrong with it
    """

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__("{}: {}".format(field, reason))
