# library_api/db/tables.py
"""
Mapeamento ORM (SQLAlchemy) das duas tabelas persistidas: `users` e `books`.
Todas as colunas são obrigatórias (NOT NULL).
"""

# ========================
# --- Importações ---
# ========================
from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# ========================
# --- Base Declarativa ---
# ========================
class Base(DeclarativeBase):
    pass

# ========================
# --- Tabelas ---
# ========================
class UserRecord(Base):
    """Credencial persistida: username (chave primária) e hash da senha."""
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(24), primary_key=True)
    password_hash: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"UserRecord(username={self.username!r})"

class BookRecord(Base):
    """Livro do catálogo. O id é atribuído pelo banco (autoincremento)."""
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"BookRecord(id={self.id!r}, title={self.title!r})"
