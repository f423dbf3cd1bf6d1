"""Schengen area membership lookup.

Members and open-border microstates count as Schengen presence; a few common
non-Schengen destinations are kept so trips there can be recorded without counting.
"""
from app.services.errors import UnknownCountryError

SCHENGEN_DAY_LIMIT = 90
WINDOW_SIZE_DAYS = 180

SCHENGEN_MEMBERS: dict[str, str] = {
    "AT": "Austria",
    "BE": "Belgium",
    "BG": "Bulgaria",
    "HR": "Croatia",
    "CZ": "Czech Republic",
    "DK": "Denmark",
    "EE": "Estonia",
    "FI": "Finland",
    "FR": "France",
    "DE": "Germany",
    "GR": "Greece",
    "HU": "Hungary",
    "IS": "Iceland",
    "IT": "Italy",
    "LV": "Latvia",
    "LI": "Liechtenstein",
    "LT": "Lithuania",
    "LU": "Luxembourg",
    "MT": "Malta",
    "NL": "Netherlands",
    "NO": "Norway",
    "PL": "Poland",
    "PT": "Portugal",
    "RO": "Romania",
    "SK": "Slovakia",
    "SI": "Slovenia",
    "ES": "Spain",
    "SE": "Sweden",
    "CH": "Switzerland",
}

# No border control with their Schengen neighbours, so days there count
MICROSTATES: dict[str, str] = {
    "MC": "Monaco",
    "VA": "Vatican City",
    "SM": "San Marino",
    "AD": "Andorra",
}

NON_SCHENGEN: dict[str, str] = {
    "IE": "Ireland",
    "CY": "Cyprus",
    "GB": "United Kingdom",
}

SCHENGEN_COUNTRY_CODES = frozenset(SCHENGEN_MEMBERS) | frozenset(MICROSTATES)
COUNTRY_NAMES: dict[str, str] = {**SCHENGEN_MEMBERS, **MICROSTATES, **NON_SCHENGEN}

_NAME_ALIASES: dict[str, str] = {
    "CZECHIA": "CZ",
    "HOLLAND": "NL",
    "THE NETHERLANDS": "NL",
    "HOLY SEE": "VA",
    "UK": "GB",
    "GREAT BRITAIN": "GB",
    "ENGLAND": "GB",
    "SCOTLAND": "GB",
    "WALES": "GB",
    "NORTHERN IRELAND": "GB",
    "EIRE": "IE",
}


def normalize_country(value: str) -> str:
    """Return the alpha-2 code for a code or country name; raise UnknownCountryError otherwise."""
    key = (value or "").strip().upper()
    if not key:
        raise UnknownCountryError(value or "")
    if key in COUNTRY_NAMES:
        return key
    if key in _NAME_ALIASES:
        return _NAME_ALIASES[key]
    for code, name in COUNTRY_NAMES.items():
        if name.upper() == key:
            return code
    raise UnknownCountryError(value)


def is_schengen_country(code: str) -> bool:
    return (code or "").strip().upper() in SCHENGEN_COUNTRY_CODES
