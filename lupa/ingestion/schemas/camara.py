"""
Response schemas for the Câmara dos Deputados open data API.

API docs: https://dadosabertos.camara.leg.br/swagger/api.html

Every listing is a flat {"dados": [...], "links": [...]} envelope; detail
endpoints wrap a single object in "dados". Fields are snake_case here and
aliased to the API's camelCase.
"""
from typing import Generic, List, Optional, TypeVar
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamaraModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Link(CamaraModel):
    rel: str
    href: str


class ListResponse(CamaraModel, Generic[T]):
    """A page of a listing endpoint."""
    dados: List[T] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)

    def link(self, rel: str) -> Optional[str]:
        for link in self.links:
            if link.rel == rel:
                return link.href
        return None

    def last_page(self) -> Optional[int]:
        """Page number advertised by the "last" link, if any."""
        href = self.link("last")
        if not href:
            return None
        values = parse_qs(urlparse(href).query).get("pagina")
        if not values:
            return None
        try:
            return int(values[0])
        except ValueError:
            return None


class DetailResponse(CamaraModel, Generic[T]):
    dados: T


# ============================================================================
# Deputies
# ============================================================================

class DeputySummary(CamaraModel):
    id: int
    uri: Optional[str] = None
    nome: str = ""
    sigla_partido: Optional[str] = None
    sigla_uf: Optional[str] = None
    id_legislatura: Optional[int] = None
    url_foto: Optional[str] = None
    email: Optional[str] = None


class Cabinet(CamaraModel):
    nome: Optional[str] = None
    predio: Optional[str] = None
    sala: Optional[str] = None
    andar: Optional[str] = None
    telefone: Optional[str] = None
    email: Optional[str] = None

    def address(self) -> Optional[str]:
        if not (self.predio or self.andar or self.sala):
            return None
        return f"{self.predio or ''}, {self.andar or ''}, Sala {self.sala or ''}"


class LatestStatus(CamaraModel):
    id: Optional[int] = None
    nome: Optional[str] = None
    sigla_partido: Optional[str] = None
    sigla_uf: Optional[str] = None
    id_legislatura: Optional[int] = None
    url_foto: Optional[str] = None
    email: Optional[str] = None
    data: Optional[str] = None
    nome_eleitoral: Optional[str] = None
    gabinete: Optional[Cabinet] = None
    situacao: Optional[str] = None
    condicao_eleitoral: Optional[str] = None


class DeputyDetail(CamaraModel):
    id: int
    uri: Optional[str] = None
    nome_civil: Optional[str] = None
    ultimo_status: LatestStatus = Field(default_factory=LatestStatus)
    cpf: Optional[str] = None
    sexo: Optional[str] = None
    url_website: Optional[str] = None
    rede_social: List[str] = Field(default_factory=list)
    data_nascimento: Optional[str] = None
    data_falecimento: Optional[str] = None
    uf_nascimento: Optional[str] = None
    municipio_nascimento: Optional[str] = None
    escolaridade: Optional[str] = None


# ============================================================================
# Expenses
# ============================================================================

class ExpenseItem(CamaraModel):
    ano: int
    mes: int
    tipo_despesa: Optional[str] = None
    cod_documento: Optional[int] = None
    tipo_documento: Optional[str] = None
    data_documento: Optional[str] = None
    num_documento: Optional[str] = None
    valor_documento: Optional[float] = None
    url_documento: Optional[str] = None
    nome_fornecedor: Optional[str] = None
    cnpj_cpf_fornecedor: Optional[str] = None
    valor_liquido: Optional[float] = None
    valor_glosa: Optional[float] = None


# ============================================================================
# Votes
# ============================================================================

class VotedProposition(CamaraModel):
    id: Optional[int] = None
    uri: Optional[str] = None
    sigla_tipo: Optional[str] = None
    numero: Optional[int] = None
    ano: Optional[int] = None
    ementa: Optional[str] = None


class RollCall(CamaraModel):
    id: str
    uri: Optional[str] = None
    data: Optional[str] = None
    data_hora_registro: Optional[str] = None
    sigla_orgao: Optional[str] = None
    uri_evento: Optional[str] = None
    proposicao_objeto: Optional[VotedProposition] = None
    uri_proposicao_objeto: Optional[str] = None
    descricao: Optional[str] = None
    aprovacao: Optional[int] = None


class DeputyRef(CamaraModel):
    id: int
    uri: Optional[str] = None
    nome: Optional[str] = None
    sigla_partido: Optional[str] = None
    sigla_uf: Optional[str] = None


class DeputyVote(CamaraModel):
    tipo_voto: Optional[str] = None
    data_registro_voto: Optional[str] = None
    deputado: DeputyRef = Field(alias="deputado_")


# ============================================================================
# Propositions
# ============================================================================

class PropositionSummary(CamaraModel):
    id: int
    uri: Optional[str] = None
    sigla_tipo: str = ""
    cod_tipo: Optional[int] = None
    numero: int = 0
    ano: int = 0
    ementa: Optional[str] = None


class PropositionState(CamaraModel):
    data_hora: Optional[str] = None
    sequencia: Optional[int] = None
    sigla_orgao: Optional[str] = None
    regime: Optional[str] = None
    descricao_tramitacao: Optional[str] = None
    descricao_situacao: Optional[str] = None
    despacho: Optional[str] = None


class PropositionDetail(CamaraModel):
    id: int
    uri: Optional[str] = None
    sigla_tipo: str = ""
    numero: int = 0
    ano: int = 0
    ementa: Optional[str] = None
    data_apresentacao: Optional[str] = None
    status_proposicao: Optional[PropositionState] = None
    descricao_tipo: Optional[str] = None
    ementa_detalhada: Optional[str] = None
    keywords: Optional[str] = None
    url_inteiro_teor: Optional[str] = None


class Author(CamaraModel):
    uri: Optional[str] = None
    nome: Optional[str] = None
    cod_tipo: Optional[int] = None
    tipo: Optional[str] = None
    ordem_assinatura: Optional[int] = None
    proponente: Optional[int] = None


class Tramitation(PropositionState):
    pass


class Theme(CamaraModel):
    cod_tema: Optional[int] = None
    tema: Optional[str] = None
    nome: Optional[str] = None

    @property
    def label(self) -> Optional[str]:
        return self.tema or self.nome


# ============================================================================
# Events / attendance
# ============================================================================

class EventBody(CamaraModel):
    id: Optional[int] = None
    sigla: Optional[str] = None
    nome: Optional[str] = None


class Event(CamaraModel):
    id: int
    uri: Optional[str] = None
    data_hora_inicio: Optional[str] = None
    data_hora_fim: Optional[str] = None
    situacao: Optional[str] = None
    descricao_tipo: Optional[str] = None
    descricao: Optional[str] = None
    orgaos: List[EventBody] = Field(default_factory=list)


class EventAttendee(CamaraModel):
    """
    A deputy present at an event.

    The endpoint has been seen returning the deputy both inline and nested
    under "deputado_".
    """
    id: Optional[int] = None
    nome: Optional[str] = None
    data_hora_registro: Optional[str] = None
    deputado: Optional[DeputyRef] = Field(None, alias="deputado_")

    @property
    def deputy_id(self) -> Optional[int]:
        if self.deputado is not None:
            return self.deputado.id
        return self.id


# Concrete envelopes
DeputyListResponse = ListResponse[DeputySummary]
DeputyDetailResponse = DetailResponse[DeputyDetail]
ExpenseListResponse = ListResponse[ExpenseItem]
RollCallListResponse = ListResponse[RollCall]
DeputyVoteListResponse = ListResponse[DeputyVote]
PropositionListResponse = ListResponse[PropositionSummary]
PropositionDetailResponse = DetailResponse[PropositionDetail]
AuthorListResponse = ListResponse[Author]
TramitationListResponse = ListResponse[Tramitation]
ThemeListResponse = ListResponse[Theme]
EventListResponse = ListResponse[Event]
AttendeeListResponse = ListResponse[EventAttendee]
