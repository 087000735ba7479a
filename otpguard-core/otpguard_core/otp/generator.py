"""
OTP Code Generation
===================
Cryptographically secure numeric codes and constant-time comparison.
"""

import hmac
import secrets


def generate_otp(length: int = 6) -> str:
    """
    Generate a numeric OTP with no leading zero.

    Codes are drawn uniformly from [10**(length-1), 10**length - 1], i.e.
    100000-999999 inclusive for the default length.

    Args:
        length: Number of digits

    Returns:
        OTP string
    """
    if length < 1:
        raise ValueError("OTP length must be at least 1")
    low = 10 ** (length - 1)
    high = 10 ** length - 1
    return str(low + secrets.randbelow(high - low + 1))


def codes_match(submitted: str, stored: str) -> bool:
    """Compare a submitted code with the stored one in constant time."""
    return hmac.compare_digest(submitted.strip().encode(), stored.encode())
