"""
Input preconditions for a discovery. Runs before any network I/O so a
bad call never reaches an autodiscover server.
"""

from typing import Optional

from email_validator import EmailNotValidError, validate_email

from .errors import ValidationError
from .models import DiscoveryRequest


def is_valid_email(addr: str) -> bool:
    if not addr:
        return False
    try:
        # display-name forms ("Alice <alice@contoso.com>") are not addresses
        validate_email(addr, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_request(email_address: Optional[str], username: Optional[str], password: Optional[str]) -> DiscoveryRequest:
    """
    Check the inputs in a fixed order and build the request.
    Raises ValidationError naming the first missing or malformed field.
    """
    if not email_address:
        raise ValidationError("mailAddress is needed")
    if not username:
        raise ValidationError("username is needed")
    if not password:
        raise ValidationError("password is needed")
    if not is_valid_email(email_address):
        raise ValidationError(f"Invalid format: {email_address}")
    return DiscoveryRequest(email_address=email_address, username=username, password=password)
