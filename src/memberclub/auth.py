"""
Operator Login Gate

The club runs with a single operator account. Logging in successfully hands
out the API key that guards every business endpoint.
"""

from dataclasses import dataclass
import hmac
import structlog

from .config import ClubConfig

logger = structlog.get_logger()


@dataclass(frozen=True)
class OperatorAccount:
    """The one operator allowed to use the console."""
    username: str
    password: str
    full_name: str

    @classmethod
    def from_config(cls, config: ClubConfig) -> "OperatorAccount":
        return cls(
            username=config.operator_username,
            password=config.operator_password,
            full_name=config.operator_name,
        )

    def validate_password(self, candidate: str) -> bool:
        return hmac.compare_digest(candidate.encode(), self.password.encode())

    def login(self, username: str, password: str) -> bool:
        """Check credentials. Both parts are compared in constant time."""
        user_ok = hmac.compare_digest(username.encode(), self.username.encode())
        password_ok = self.validate_password(password)

        if user_ok and password_ok:
            logger.info("operator_login", username=username)
            return True

        logger.warning("operator_login_failed", username=username)
        return False


def api_key_matches(presented: str, expected: str) -> bool:
    return hmac.compare_digest(presented.encode(), expected.encode())
