import datetime
import logging
import math
import time
from typing import Callable, Optional, Union

from . import utils
from .config import DEFAULT_DIGITS, DEFAULT_INTERVAL, HashAlgorithm
from .exceptions import OtpValidationError
from .otp import OTP

log = logging.getLogger(__name__)

Timestamp = Union[int, float]


class TOTP(OTP):
    """
    Handler for time-based OTP counters.
    """

    def __init__(
        self,
        s: bytes,
        digits: int = DEFAULT_DIGITS,
        digest: Union[str, HashAlgorithm] = "SHA1",
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        interval: int = DEFAULT_INTERVAL,
        now_provider: Callable[[], Timestamp] = time.time,
    ) -> None:
        """
        :param s: raw secret bytes
        :param digits: number of integers in the OTP. Some apps expect this to be 6 digits, others support more.
        :param digest: name of the HMAC hash, SHA1, SHA256 or SHA512, or a HashAlgorithm
        :param name: account name
        :param issuer: issuer
        :param interval: the time interval in seconds for OTP. This defaults to 30.
        :param now_provider: zero-argument callable returning the current Unix time
        """
        if not callable(now_provider):
            raise OtpValidationError("now_provider", "must be callable")
        self.now_provider = now_provider
        super().__init__(s=s, digits=digits, digest=digest, name=name, issuer=issuer, interval=interval)

    @property
    def interval(self) -> int:
        return self.config.interval

    def at(self, for_time: Timestamp) -> str:
        """
        Generates the OTP for the given Unix timestamp.

        :param for_time: seconds since the epoch
        :returns: OTP value
        """
        return self.generate_otp(self.timecode(for_time))

    def at_datetime(self, for_time: datetime.datetime) -> str:
        """
        Generates the OTP for the given datetime. Naive datetimes are taken as UTC.
        """
        return self.at(_datetime_to_timestamp("for_time", for_time))

    def now(self) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return self.at(self._now())

    def timecode(self, for_time: Timestamp) -> int:
        """
        Number of whole intervals elapsed since the epoch at ``for_time``.
        """
        utils.check_timestamp("for_time", for_time)
        return math.floor(for_time) // self.interval

    def verify(
        self,
        otp: str,
        drift: int = 0,
        after: Optional[Timestamp] = None,
        at: Optional[Timestamp] = None,
    ) -> Optional[int]:
        """
        Verifies the OTP passed in against the OTP at ``at`` and the adjacent
        intervals up to ``drift`` seconds either side. OTPs from ``after``
        and earlier are excluded.

        The return value is the start of the matching interval; persist it
        and pass it back as ``after`` on the next call to stop the same code
        being accepted twice.

        :param otp: the OTP to check against
        :param drift: clock skew tolerance in seconds
        :param after: timestamp of the last accepted OTP, if any
        :param at: time to check the OTP at, defaults to now
        :returns: the interval start timestamp of the match, or None
        """
        utils.check_otp(otp)
        utils.check_drift(drift)
        if at is None:
            at = self._now()
        utils.check_timestamp("at", at)

        first = self._interval_start(max(at - drift, 0))
        last = self._interval_start(at + drift)

        if after is not None:
            utils.check_timestamp("after", after)
            after_interval = self._interval_start(after)
            if after_interval >= first:
                first = after_interval + self.interval
                log.debug("replay floor moved first interval to %d", first)
            if first > last:
                log.debug("no intervals left after %d, window ends at %d", after_interval, last)
                return None

        log.debug("checking TOTP intervals %d..%d", first, last)
        for t in range(first, last + 1, self.interval):
            if utils.strings_equal(otp, self.at(t)):
                log.debug("TOTP matched interval starting at %d", t)
                return t
        return None

    def verify_datetime(
        self,
        otp: str,
        for_time: datetime.datetime,
        drift: int = 0,
        after: Optional[datetime.datetime] = None,
    ) -> Optional[int]:
        """
        Same as :meth:`verify`, with the evaluation instant and the optional
        replay floor given as datetimes. Naive datetimes are taken as UTC.

        :returns: the interval start Unix timestamp of the match, or None
        """
        at = _datetime_to_timestamp("at", for_time)
        if after is not None:
            after = _datetime_to_timestamp("after", after)  # type: ignore
        return self.verify(otp, drift=drift, after=after, at=at)

    def provisioning_uri(self, name: Optional[str] = None, issuer_name: Optional[str] = None, **kwargs) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format

        :param name: name of the user account
        :param issuer_name: the name of the OTP issuer; this will be the
            organization title of the OTP entry in Authenticator
        :returns: provisioning URI
        """
        return utils.build_uri(
            self.secret,
            name if name else self.name,
            issuer=issuer_name if issuer_name else self.issuer,
            algorithm=self.digest,
            digits=self.digits,
            period=self.interval,
            **kwargs,
        )

    def _now(self) -> Timestamp:
        return utils.check_timestamp("now", self.now_provider())

    def _interval_start(self, for_time: Timestamp) -> int:
        return math.floor(for_time) // self.interval * self.interval


def _datetime_to_timestamp(field: str, value: datetime.datetime) -> float:
    if not isinstance(value, datetime.datetime):
        raise OtpValidationError(field, "must be a datetime")
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.timestamp()
