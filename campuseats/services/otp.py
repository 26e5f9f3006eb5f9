import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from pydantic import BaseModel

from campuseats.core.config import OTP_TTL_SECONDS

log = logging.getLogger(__name__)


class OtpChallenge(BaseModel):
    phone: str
    code: str
    expires_at: datetime
    verified: bool = False


class SmsGateway:
    """
    Stand-in for an SMS provider. Codes are random 6-digit strings held in
    memory for OTP_TTL_SECONDS; "sending" one writes it to the log.
    """

    def __init__(self, ttl_seconds: int = OTP_TTL_SECONDS):
        self.ttl = timedelta(seconds=ttl_seconds)
        self._challenges: Dict[str, OtpChallenge] = {}

    async def send_otp(self, phone: str) -> OtpChallenge:
        challenge = OtpChallenge(
            phone=phone,
            code=f"{secrets.randbelow(10 ** 6):06d}",
            expires_at=datetime.now(timezone.utc) + self.ttl,
        )
        self._challenges[phone] = challenge
        log.info(f"OTP for {phone[:2]}******{phone[-2:]}: {challenge.code}")
        return challenge

    async def verify_otp(self, phone: str, code: str) -> bool:
        challenge: Optional[OtpChallenge] = self._challenges.get(phone)
        if not challenge or challenge.verified:
            return False
        if datetime.now(timezone.utc) > challenge.expires_at:
            del self._challenges[phone]
            return False
        if not secrets.compare_digest(challenge.code, code.strip()):
            return False
        challenge.verified = True
        return True


gateway = SmsGateway()


def get_sms_gateway() -> SmsGateway:
    return gateway
