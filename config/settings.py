# config/settings.py
"""
Settings файл - здесь живут все настройки приложения.

Логика: когда приложение запускается, оно читает .env файл
и создает объект 'config' со всеми необходимыми значениями.

Если какое-то значение из .env потеряется или будет неправильного типа,
Pydantic сразу выдаст ошибку и подскажет что не так.
"""

from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Основной класс настроек.

    BaseSettings читает .env, валидирует типы и подставляет
    значения по умолчанию для всего что не задано.
    """

    # ==========================================
    # TELEGRAM BOT
    # ==========================================
    bot_token: str = ""

    # ==========================================
    # DATABASE
    # ==========================================
    database_url: str = "sqlite:///./backoffice.db"
    database_echo: bool = False

    # ==========================================
    # REDIS (FSM бота). Пусто = MemoryStorage
    # ==========================================
    redis_url: Optional[str] = None

    # ==========================================
    # API
    # ==========================================
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    default_page_size: int = 10

    # ==========================================
    # AUTH (JWT + bcrypt)
    # ==========================================
    jwt_secret: str = "change-me-this-secret-is-only-for-local-dev"
    jwt_algorithm: str = "HS256"
    access_token_minutes: int = 60 * 24
    refresh_token_days: int = 7
    # cost bcrypt (2^rounds итераций)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # ==========================================
    # ФИНАНСОВАЯ ПОЛИТИКА ЗАКАЗА
    # ==========================================
    # Доли от суммы заказа. Остаток = чистая прибыль.
    product_cost_rate: Decimal = Field(default=Decimal("0.40"), ge=0, le=1)
    waiter_salary_rate: Decimal = Field(default=Decimal("0.10"), ge=0, le=1)
    other_expenses_rate: Decimal = Field(default=Decimal("0.15"), ge=0, le=1)
    currency: str = "so'm"

    # ==========================================
    # ENVIRONMENT
    # ==========================================
    environment: Literal["development", "production", "test"] = "development"
    debug: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False
    )

    @property
    def async_database_url(self) -> str:
        """Convert standard database URL to its async driver form"""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("sqlite://"):
            url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if "sslmode=disable" in url:
            url = url.replace("?sslmode=disable", "")
        return url


config = Settings()
