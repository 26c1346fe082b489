# library_api/models/user.py
"""
Este módulo define os modelos Pydantic para a entidade Usuário (User):
o payload de registro (com confirmação de senha), o payload de login,
a representação interna com o hash da senha e a resposta do registro.
"""

# ========================
# --- Importações ---
# ========================
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ========================
# --- Regras de Credenciais ---
# ========================
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_.\-]{1,22}[a-zA-Z0-9]$")
PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*()_+={}[]|:;\"'<>,.?/~`-"
_SPECIALS = re.escape(PASSWORD_SPECIAL_CHARACTERS)
PASSWORD_PATTERN = re.compile(
    rf"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[{_SPECIALS}])[a-zA-Z0-9{_SPECIALS}]{{8,32}}$"
)

USERNAME_RULE_MESSAGE = (
    "O nome de usuário deve começar e terminar com letra ou número e conter apenas "
    "letras, números, hífens, underscores ou pontos."
)
PASSWORD_RULE_MESSAGE = (
    "A senha deve ter entre 8 e 32 caracteres, com ao menos uma letra minúscula, "
    f"uma maiúscula, um dígito e um caractere especial ({PASSWORD_SPECIAL_CHARACTERS})."
)

# ========================
# --- Modelos Pydantic de User ---
# ========================

# --- Modelo para Registro ---
class UserRegistration(BaseModel):
    """
    Dados esperados no registro de um novo usuário.
    A confirmação chega como `confirmPassword` no JSON.
    """
    username: str = Field(..., title="Nome de Usuário", min_length=3, max_length=24)
    password: str = Field(..., title="Senha", min_length=8, max_length=32)
    confirm_password: str = Field(..., title="Confirmação da Senha", alias="confirmPassword")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "username": "alice01",
                    "password": "Str0ng!Pass",
                    "confirmPassword": "Str0ng!Pass"
                }
            ]
        },
    )

    @field_validator("username")
    @classmethod
    def check_username_pattern(cls, value: str) -> str:
        if not USERNAME_PATTERN.fullmatch(value):
            raise ValueError(USERNAME_RULE_MESSAGE)
        return value

    @field_validator("password")
    @classmethod
    def check_password_policy(cls, value: str) -> str:
        if not PASSWORD_PATTERN.fullmatch(value):
            raise ValueError(PASSWORD_RULE_MESSAGE)
        return value

    @model_validator(mode="after")
    def check_passwords_match(self) -> "UserRegistration":
        if self.password != self.confirm_password:
            raise ValueError("A senha e a confirmação não conferem.")
        return self

# --- Modelo para Login ---
class UserLogin(BaseModel):
    """
    Credenciais de login. Só a presença é validada aqui; a política de senha
    vale apenas no registro.
    """
    username: str = Field(..., title="Nome de Usuário", min_length=1)
    password: str = Field(..., title="Senha", min_length=1)

# --- Representação Interna ---
class UserInDB(BaseModel):
    """
    Usuário como armazenado no banco. Uso interno: nunca é serializado na API.
    """
    username: str
    password_hash: str = Field(..., min_length=50, max_length=100)

    model_config = ConfigDict(from_attributes=True)

# --- Resposta do Registro ---
class RegistrationResponse(BaseModel):
    """
    Resposta do registro bem-sucedido. Nenhum token é emitido aqui.
    """
    message: str = "Usuário registrado com sucesso."
    username: str
