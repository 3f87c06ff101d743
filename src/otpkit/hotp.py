import logging
from typing import Optional, Union

from . import utils
from .config import DEFAULT_DIGITS, HashAlgorithm
from .otp import OTP

log = logging.getLogger(__name__)


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.
    """

    def __init__(
        self,
        s: bytes,
        digits: int = DEFAULT_DIGITS,
        digest: Union[str, HashAlgorithm] = "SHA1",
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        initial_count: int = 0,
    ) -> None:
        """
        :param s: raw secret bytes
        :param initial_count: starting HMAC counter value, defaults to 0
        :param digits: number of integers in the OTP. Some apps expect this to be 6 digits, others support more.
        :param digest: name of the HMAC hash, SHA1, SHA256 or SHA512, or a HashAlgorithm
        :param name: account name
        :param issuer: issuer
        """
        self.initial_count = utils.check_counter("initial_count", initial_count)
        super().__init__(s=s, digits=digits, digest=digest, name=name, issuer=issuer)

    def at(self, count: int) -> str:
        """
        Generates the OTP for the given count.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        utils.check_counter("count", count)
        return self.generate_otp(self.initial_count + count)

    def verify(self, otp: str, counter: int) -> Optional[int]:
        """
        Verifies the OTP passed in against the OTP at ``counter``.
        ``counter`` is the absolute HMAC counter; ``initial_count`` is not added.

        Only that one counter is checked; callers wanting look-ahead call
        this once per counter they are willing to accept.

        :param otp: the OTP to check against
        :param counter: the OTP HMAC counter
        :returns: ``counter`` on a match, None otherwise
        """
        utils.check_otp(otp)
        utils.check_counter("counter", counter)
        if utils.strings_equal(otp, self.generate_otp(counter)):
            log.debug("HOTP matched at counter %d", counter)
            return counter
        log.debug("HOTP did not match at counter %d", counter)
        return None

    def provisioning_uri(
        self,
        name: Optional[str] = None,
        initial_count: Optional[int] = None,
        issuer_name: Optional[str] = None,
        **kwargs,
    ) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format

        :param name: name of the user account
        :param initial_count: starting HMAC counter value, defaults to 0
        :param issuer_name: the name of the OTP issuer; this will be the
            organization title of the OTP entry in Authenticator
        :returns: provisioning URI
        """
        return utils.build_uri(
            self.secret,
            name=name if name else self.name,
            initial_count=initial_count if initial_count is not None else self.initial_count,
            issuer=issuer_name if issuer_name else self.issuer,
            algorithm=self.digest,
            digits=self.digits,
            **kwargs,
        )
