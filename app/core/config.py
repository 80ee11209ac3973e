"""Configuración de la aplicación mediante variables de entorno."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuración cargada desde .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Mãos Unidas Back Office API"
    debug: bool = False
    log_level: str = "INFO"

    # JWT (los tokens los emite el proveedor de autenticación externo)
    jwt_secret_key: str = "cambiar-en-produccion-clave-secreta-muy-segura"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24  # 24 horas

    # PostgreSQL
    postgres_host: str = "127.0.0.1"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "maos_unidas_bd"
    # Si se define, reemplaza la URL construida con los campos postgres_*
    database_url: str | None = None

    # Plan de pagos por defecto (USD)
    default_enrollment_fee: float = 20
    default_monthly_fee: float = 40
    default_number_of_months: int = 10
    default_full_payment_amount: float = 420

    # Valores por defecto al crear estudiantes desde candidatos
    default_grade: str = "Jardín"
    default_city: str = "Lichinga"
    default_province: str = "Niassa"
    default_country: str = "Mozambique"

    # Relay de correo (recordatorios de pago)
    email_relay_url: str = "https://sendpaymentreminder.example.com"
    email_relay_timeout: float = 15.0

    # Almacenamiento de archivos (fotos y comprobantes)
    storage_dir: str = "storage"
    storage_base_url: str = "/files"
    max_photo_bytes: int = 5 * 1024 * 1024
    max_receipt_bytes: int = 10 * 1024 * 1024

    @property
    def database_url_async(self) -> str:
        """URL para SQLAlchemy con driver asyncpg (uso en la app)."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
