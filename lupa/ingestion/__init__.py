"""Ingestion: source adapters and the reconciliation core they share."""

from lupa.ingestion.client import FetchError, RateLimitedClient, RateLimiter
from lupa.ingestion.politicians import IdentityError, PoliticianSync
from lupa.ingestion.camara_deputies import CamaraDeputiesIngester
from lupa.ingestion.camara_expenses import CamaraExpensesIngester
from lupa.ingestion.camara_votes import CamaraVotesIngester
from lupa.ingestion.camara_propositions import CamaraPropositionsIngester
from lupa.ingestion.camara_attendance import CamaraAttendanceIngester
from lupa.ingestion.senado import SenadoIngester
from lupa.ingestion.executives import ExecutivesIngester

__all__ = [
    "FetchError",
    "RateLimitedClient",
    "RateLimiter",
    "IdentityError",
    "PoliticianSync",
    "CamaraDeputiesIngester",
    "CamaraExpensesIngester",
    "CamaraVotesIngester",
    "CamaraPropositionsIngester",
    "CamaraAttendanceIngester",
    "SenadoIngester",
    "ExecutivesIngester",
]
