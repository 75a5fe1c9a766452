"""
Brazilian phone number helpers
"""
import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: Optional[str]) -> str:
    """
    Strip formatting and the Brazilian country code from a phone number

    Args:
        phone: Phone number with or without formatting

    Returns:
        str: Digits only, e.g. "49999214230"
    """
    if not phone:
        return ""

    normalized = _NON_DIGITS.sub("", phone)

    if normalized.startswith("55") and len(normalized) in (12, 13):
        without_country_code = normalized[2:]
        # 12 digits with a mobile prefix lost the leading 9 (554999214230)
        if len(normalized) == 12 and without_country_code[2] == "9":
            normalized = without_country_code[:2] + "9" + without_country_code[2:]
        else:
            normalized = without_country_code

    # Trunk prefix on the area code (049 -> 49)
    if len(normalized) == 11 and normalized.startswith("0"):
        normalized = normalized[1:]

    return normalized


def validate_brazilian_phone(phone: Optional[str]) -> bool:
    """
    Check a phone number is a valid Brazilian landline or mobile

    Returns:
        bool: True for a 10-digit landline (3rd digit 2-5) or an 11-digit
        mobile (3rd digit 9) with an area code between 11 and 99
    """
    normalized = normalize_phone(phone)

    if len(normalized) not in (10, 11):
        return False

    area_code = int(normalized[:2])
    if area_code < 11 or area_code > 99:
        return False

    if len(normalized) == 11 and normalized[2] != "9":
        return False

    if len(normalized) == 10 and not "2" <= normalized[2] <= "5":
        return False

    return True


def format_brazilian_phone(phone: Optional[str]) -> str:
    """Format as (XX) 9XXXX-XXXX or (XX) XXXX-XXXX; empty string if invalid"""
    normalized = normalize_phone(phone)

    if not validate_brazilian_phone(normalized):
        return ""

    if len(normalized) == 11:
        return f"({normalized[:2]}) {normalized[2:7]}-{normalized[7:]}"
    return f"({normalized[:2]}) {normalized[2:6]}-{normalized[6:]}"


def compare_phones(phone1: Optional[str], phone2: Optional[str]) -> bool:
    """True when both numbers normalize to the same non-empty digits"""
    normalized1 = normalize_phone(phone1)
    normalized2 = normalize_phone(phone2)

    if not normalized1 or not normalized2:
        return False

    return normalized1 == normalized2
