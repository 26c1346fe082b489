# library_api/routers/health.py

# ========================
# --- Importações ---
# ========================
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.db.database import check_database_connection, get_optional_db_session


# ========================
# --- Configuração do Router ---
# ========================
router = APIRouter()


# ========================
# --- Rotas da API ---
# ========================
@router.get("/health", tags=["Health"])
async def health_check(db: Optional[AsyncSession] = Depends(get_optional_db_session)):
    if db is None or not await check_database_connection(db):
        return JSONResponse(content={"status": "error", "message": "Banco de dados não está disponível"}, status_code=503)

    return JSONResponse(content={"status": "ok"})
