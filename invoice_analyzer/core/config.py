from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("invoice-analyzer", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Gemini
    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field("gemini-1.5-flash", alias="GEMINI_MODEL")
    gemini_temperature: float = Field(0.2, alias="GEMINI_TEMPERATURE")
    gemini_top_p: float = Field(1.0, alias="GEMINI_TOP_P")
    gemini_top_k: int = Field(32, alias="GEMINI_TOP_K")
    gemini_max_output_tokens: int = Field(2048, alias="GEMINI_MAX_OUTPUT_TOKENS")

    # Invoice storage: "sqlite" (persistent) or "memory" (demo/testing)
    invoice_store: str = Field("sqlite", alias="INVOICE_STORE")
    sqlite_db_path: str = Field("invoices.db", alias="SQLITE_DB_PATH")

    # Uploads are staged here while they are processed
    upload_dir: str = Field("uploads", alias="UPLOAD_DIR")
    max_upload_bytes: int = Field(5 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")

    # CORS allowed origins (comma-separated list)
    cors_origins: str = Field("*", alias="CORS_ORIGINS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

settings = Settings()
