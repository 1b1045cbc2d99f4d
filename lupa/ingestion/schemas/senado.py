"""
Response schemas for the Senado Federal open data API.

API docs: https://www12.senado.leg.br/dados-abertos

Responses are deeply nested PascalCase envelopes. Where the API means "a
list" it sends a bare object when there is exactly one element, so every
list field accepts both.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_pascal


def as_list(value: Any) -> Any:
    """Wrap a lone object in a list; leave lists and None alone."""
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    return value


class SenadoModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


class SenatorIdentification(SenadoModel):
    codigo_parlamentar: str
    nome_parlamentar: str = ""
    nome_completo_parlamentar: Optional[str] = None
    sexo_parlamentar: Optional[str] = None
    forma_tratamento: Optional[str] = None
    url_foto_parlamentar: Optional[str] = None
    url_pagina_parlamentar: Optional[str] = None
    email_parlamentar: Optional[str] = None
    sigla_partido_parlamentar: Optional[str] = None
    uf_parlamentar: Optional[str] = None

    @field_validator("codigo_parlamentar", mode="before")
    @classmethod
    def _code_as_string(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class Legislature(SenadoModel):
    numero_legislatura: Optional[str] = None
    data_inicio: Optional[str] = None
    data_fim: Optional[str] = None


class Mandate(SenadoModel):
    codigo_mandato: Optional[str] = None
    uf_parlamentar: Optional[str] = None
    primeira_legislatura_do_mandato: Optional[Legislature] = None
    segunda_legislatura_do_mandato: Optional[Legislature] = None
    descricao_participacao: Optional[str] = None


class SenatorSummary(SenadoModel):
    identificacao_parlamentar: SenatorIdentification
    mandato: Optional[Mandate] = None


class _Senators(SenadoModel):
    parlamentar: List[SenatorSummary] = Field(default_factory=list)

    @field_validator("parlamentar", mode="before")
    @classmethod
    def _single_senator(cls, value: Any) -> Any:
        return as_list(value)


class _SenatorList(SenadoModel):
    parlamentares: _Senators = Field(default_factory=_Senators)


class SenatorListResponse(SenadoModel):
    """GET /senador/lista/atual.json"""
    lista_parlamentar_em_exercicio: _SenatorList = Field(default_factory=_SenatorList)

    @property
    def senators(self) -> List[SenatorSummary]:
        return self.lista_parlamentar_em_exercicio.parlamentares.parlamentar


# ============================================================================
# Detail
# ============================================================================

class BasicData(SenadoModel):
    data_nascimento: Optional[str] = None
    naturalidade: Optional[str] = None
    uf_naturalidade: Optional[str] = None
    endereco_parlamentar: Optional[str] = None


class Phone(SenadoModel):
    numero_telefone: Optional[str] = None
    ordem_publicacao: Optional[str] = None


class _Phones(SenadoModel):
    telefone: List[Phone] = Field(default_factory=list)

    @field_validator("telefone", mode="before")
    @classmethod
    def _single_phone(cls, value: Any) -> Any:
        return as_list(value)


class SenatorDetail(SenadoModel):
    identificacao_parlamentar: SenatorIdentification
    dados_basicos_parlamentar: BasicData = Field(default_factory=BasicData)
    telefones: Optional[_Phones] = None

    @property
    def first_phone(self) -> Optional[str]:
        if self.telefones and self.telefones.telefone:
            return self.telefones.telefone[0].numero_telefone
        return None


class _SenatorDetailEnvelope(SenadoModel):
    parlamentar: SenatorDetail


class SenatorDetailResponse(SenadoModel):
    """GET /senador/{code}.json"""
    detalhe_parlamentar: _SenatorDetailEnvelope

    @property
    def senator(self) -> SenatorDetail:
        return self.detalhe_parlamentar.parlamentar
