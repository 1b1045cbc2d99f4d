"""
Application-wide constants.

Collection names, lookup tables, and other magic numbers live here.
Lookup tables are read-only; absent keys map to a defined default.
"""
from types import MappingProxyType

# MongoDB Collection Names
COLLECTION_POLITICIANS = "politicians"
COLLECTION_EXPENSES = "expenses"
COLLECTION_VOTES = "votes"
COLLECTION_PROPOSITIONS = "propositions"
COLLECTION_ATTENDANCE = "attendance"

# Câmara reports a deputy as serving with this status
CAMARA_IN_OFFICE_STATUS = "Exercício"

# Brazil-wide jurisdiction code for the presidency
NATIONAL_JURISDICTION = "BR"

# ============================================================================
# Party colors
# ============================================================================

DEFAULT_PARTY_COLOR = "#666666"

PARTY_COLORS = MappingProxyType({
    "PT": "#CC0000",
    "PL": "#003366",
    "UNIÃO": "#2E3092",
    "PP": "#0066CC",
    "MDB": "#00AA00",
    "PSD": "#FF6600",
    "REPUBLICANOS": "#0033CC",
    "PDT": "#FF0000",
    "PSDB": "#003399",
    "PSOL": "#FFD700",
    "PSB": "#FF6347",
    "PODE": "#00CED1",
    "CIDADANIA": "#9932CC",
    "AVANTE": "#FF8C00",
    "SOLIDARIEDADE": "#FF4500",
    "PCDOB": "#8B0000",
    "PV": "#228B22",
    "NOVO": "#FF6600",
    "REDE": "#00AA66",
    "PRD": "#1E90FF",
    "AGIR": "#4169E1",
})

PARTY_NAMES = MappingProxyType({
    "PT": "Partido dos Trabalhadores",
    "PL": "Partido Liberal",
    "UNIÃO": "União Brasil",
    "PP": "Progressistas",
    "MDB": "Movimento Democrático Brasileiro",
    "PSD": "Partido Social Democrático",
    "REPUBLICANOS": "Republicanos",
    "PDT": "Partido Democrático Trabalhista",
    "PSDB": "Partido da Social Democracia Brasileira",
    "PSOL": "Partido Socialismo e Liberdade",
    "PSB": "Partido Socialista Brasileiro",
    "PODE": "Podemos",
    "CIDADANIA": "Cidadania",
    "AVANTE": "Avante",
    "SOLIDARIEDADE": "Solidariedade",
    "PCDOB": "Partido Comunista do Brasil",
    "PV": "Partido Verde",
    "NOVO": "Partido Novo",
    "REDE": "Rede Sustentabilidade",
})

# ============================================================================
# Salaries (gross, net) by office type, in BRL
# ============================================================================

OFFICE_SALARIES = MappingProxyType({
    "FEDERAL_DEPUTY": (33763.00, 25000.00),
    "SENATOR": (41650.92, 30000.00),
    "PRESIDENT": (41000.00, 30000.00),
    "GOVERNOR": (35000.00, 25000.00),
})

# ============================================================================
# Vote choices as reported by the Câmara ("tipoVoto")
# ============================================================================

DEFAULT_VOTE_CHOICE = "ABSENT"

VOTE_CHOICES = MappingProxyType({
    "sim": "YES",
    "não": "NO",
    "nao": "NO",
    "abstenção": "ABSTENTION",
    "abstencao": "ABSTENTION",
    "art. 17": "ABSTENTION",
    "obstrução": "OBSTRUCTION",
    "obstrucao": "OBSTRUCTION",
})

# ============================================================================
# Proposition status, matched against Câmara "descricaoSituacao"
# ============================================================================

DEFAULT_PROPOSITION_STATUS = "IN_PROGRESS"

PROPOSITION_STATUS_MARKERS = (
    ("arquivad", "ARCHIVED"),
    ("transformad", "APPROVED"),
    ("aprovad", "APPROVED"),
    ("rejeitad", "REJECTED"),
    ("retirad", "WITHDRAWN"),
)


def party_color(abbreviation: str | None) -> str:
    """Color for a party abbreviation, or the default for unknown parties."""
    if not abbreviation:
        return DEFAULT_PARTY_COLOR
    return PARTY_COLORS.get(abbreviation.strip().upper(), DEFAULT_PARTY_COLOR)


def party_name(abbreviation: str | None) -> str:
    """Full party name, or an empty string for unknown parties."""
    if not abbreviation:
        return ""
    return PARTY_NAMES.get(abbreviation.strip().upper(), "")


def office_salary(office_type: str) -> tuple[float | None, float | None]:
    """Gross and net salary for an office type, (None, None) when unknown."""
    return OFFICE_SALARIES.get(office_type, (None, None))


def vote_choice(raw: str | None) -> str:
    """Map a Câmara vote string onto our VoteChoice values."""
    if not raw:
        return DEFAULT_VOTE_CHOICE
    return VOTE_CHOICES.get(raw.strip().lower(), DEFAULT_VOTE_CHOICE)


def proposition_status(situation: str | None) -> str:
    """Map a free-text situation description onto a PropositionStatus value."""
    if not situation:
        return DEFAULT_PROPOSITION_STATUS
    lowered = situation.lower()
    for marker, status in PROPOSITION_STATUS_MARKERS:
        if marker in lowered:
            return status
    return DEFAULT_PROPOSITION_STATUS
