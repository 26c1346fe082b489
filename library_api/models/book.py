# library_api/models/book.py
"""
Este módulo define os modelos Pydantic para a entidade Livro (Book).
No servidor, os três campos de texto são apenas obrigatórios e não vazios;
os limites de tamanho e o conjunto de caracteres permitidos são regras do
cliente (`library_client.validation`).
"""

# ========================
# --- Importações ---
# ========================
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# ========================
# --- Modelos Pydantic de Book ---
# ========================

# --- Modelo Base ---
class BookBase(BaseModel):
    """
    Campos editáveis de um livro.
    """
    title: str = Field(..., title="Título", min_length=1)
    author: str = Field(..., title="Autor", min_length=1)
    description: str = Field(..., title="Descrição", min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Dune",
                    "author": "Frank Herbert",
                    "description": "Desert planet saga"
                }
            ]
        }
    }

# --- Modelos para Operações ---
class BookCreate(BookBase):
    """
    Payload de criação. O `id` é sempre atribuído pelo servidor.
    """
    pass

class BookUpdate(BookBase):
    """
    Payload de atualização (sobrescrita completa dos três campos).
    Um `id` no corpo é aceito, mas precisa coincidir com o da rota.
    """
    id: Optional[int] = Field(None, title="ID do Livro")

# --- Modelo de Resposta ---
class Book(BookBase):
    """
    Livro como armazenado e retornado pela API.
    """
    id: int = Field(..., title="ID do Livro")

    model_config = ConfigDict(from_attributes=True)
