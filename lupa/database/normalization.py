"""
Data Normalization Module

Centralized functions to transform raw source values into our standardized
database format. All ingesters should use these functions so that identity
matching and lookups see the same shapes regardless of the source.

Usage:
    from lupa.database.normalization import normalize_name, normalize_state, parse_date

    # In your ingester:
    civil_name_normalized = normalize_name(raw["nomeCivil"])
    birth_date = parse_date(raw["dataNascimento"])
"""
import re
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse


# ============================================================================
# Timestamps
# ============================================================================

def utcnow() -> datetime:
    """
    Current UTC time as a naive datetime, truncated to milliseconds.

    MongoDB stores datetimes with millisecond precision and hands them back
    naive, so everything we write or compare goes through this.
    """
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


# ============================================================================
# Dates
# ============================================================================

DATE_LAYOUTS = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%d/%m/%Y",
)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse the date formats the government APIs use.

    Args:
        value: Raw date string (e.g., "1945-10-27", "27/10/1945",
               "2024-03-12T14:05:00")

    Returns:
        Naive datetime, or None when empty or unparseable

    Examples:
        >>> parse_date("1945-10-27")
        datetime.datetime(1945, 10, 27, 0, 0)
        >>> parse_date("27/10/1945")
        datetime.datetime(1945, 10, 27, 0, 0)
    """
    if not value:
        return None

    cleaned = value.strip()
    for layout in DATE_LAYOUTS:
        try:
            return datetime.strptime(cleaned, layout)
        except ValueError:
            continue

    # ISO strings with offsets or fractions ("2024-03-12T14:05:00.000-03:00")
    try:
        parsed = datetime.fromisoformat(cleaned.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


# ============================================================================
# Names
# ============================================================================

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: Optional[str]) -> str:
    """
    Normalize a legal name for identity matching.

    Case folding and whitespace collapsing only; accents and spelling are
    left alone so distinct names never merge.

    Examples:
        >>> normalize_name("  Luiz  Inácio LULA da Silva ")
        "luiz inácio lula da silva"
    """
    if not name:
        return ""
    return _WHITESPACE.sub(" ", name).strip().casefold()


# ============================================================================
# State Normalization
# ============================================================================

STATE_NAME_TO_CODE = {
    "Acre": "AC", "Alagoas": "AL", "Amapá": "AP", "Amazonas": "AM",
    "Bahia": "BA", "Ceará": "CE", "Distrito Federal": "DF",
    "Espírito Santo": "ES", "Goiás": "GO", "Maranhão": "MA",
    "Mato Grosso": "MT", "Mato Grosso do Sul": "MS", "Minas Gerais": "MG",
    "Pará": "PA", "Paraíba": "PB", "Paraná": "PR", "Pernambuco": "PE",
    "Piauí": "PI", "Rio de Janeiro": "RJ", "Rio Grande do Norte": "RN",
    "Rio Grande do Sul": "RS", "Rondônia": "RO", "Roraima": "RR",
    "Santa Catarina": "SC", "São Paulo": "SP", "Sergipe": "SE",
    "Tocantins": "TO",
}

# Reverse mapping for validation
STATE_CODE_TO_NAME = {v: k for k, v in STATE_NAME_TO_CODE.items()}


def normalize_state(state: Optional[str]) -> Optional[str]:
    """
    Normalize a Brazilian state (UF) to its 2-letter code.

    Args:
        state: State name or code (e.g., "São Paulo", "SP", "sp")

    Returns:
        2-letter uppercase code or None if invalid

    Examples:
        >>> normalize_state("sp")
        "SP"
        >>> normalize_state("Minas Gerais")
        "MG"
    """
    if not state:
        return None

    state_clean = state.strip()

    if len(state_clean) == 2:
        code = state_clean.upper()
        if code in STATE_CODE_TO_NAME:
            return code
        return None

    if state_clean in STATE_NAME_TO_CODE:
        return STATE_NAME_TO_CODE[state_clean]

    # Case-insensitive match
    for full_name, code in STATE_NAME_TO_CODE.items():
        if full_name.casefold() == state_clean.casefold():
            return code

    return None


# ============================================================================
# Gender Normalization
# ============================================================================

GENDER_MAPPINGS = {
    "M": "M",
    "MASCULINO": "M",
    "F": "F",
    "FEMININO": "F",
}


def normalize_gender(value: Optional[str]) -> str:
    """
    Normalize gender to "M", "F" or "OTHER".

    Examples:
        >>> normalize_gender("Feminino")
        "F"
        >>> normalize_gender(None)
        "OTHER"
    """
    if not value:
        return "OTHER"
    return GENDER_MAPPINGS.get(value.strip().upper(), "OTHER")


# ============================================================================
# Social media
# ============================================================================

def social_handles(urls: Optional[list[str]]) -> dict:
    """
    Extract Twitter/X, Instagram and Facebook handles from profile URLs.

    Args:
        urls: Profile URLs as published by the source

    Returns:
        Dict with any of "twitter", "instagram", "facebook"

    Examples:
        >>> social_handles(["https://twitter.com/fulano", "https://www.instagram.com/fulano/"])
        {"twitter": "@fulano", "instagram": "@fulano"}
    """
    handles = {}
    for url in urls or []:
        lowered = url.strip().lower()
        last = lowered.rstrip("/").rsplit("/", 1)[-1]
        if not last:
            continue
        if "twitter.com" in lowered or "x.com" in lowered:
            handles["twitter"] = "@" + last
        elif "instagram.com" in lowered:
            handles["instagram"] = "@" + last
        elif "facebook.com" in lowered:
            handles["facebook"] = last
    return handles


# ============================================================================
# URIs
# ============================================================================

def trailing_id(uri: Optional[str]) -> Optional[str]:
    """
    Last path segment of a resource URI.

    Examples:
        >>> trailing_id("https://dadosabertos.camara.leg.br/api/v2/deputados/204554")
        "204554"
    """
    if not uri:
        return None
    path = urlparse(uri).path.rstrip("/")
    if not path:
        return None
    return path.rsplit("/", 1)[-1] or None
