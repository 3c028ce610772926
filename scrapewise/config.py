from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Hugging Face inference (optional; empty token disables the oracle)
    huggingface_token: str = ""
    inference_base_url: str = "https://api-inference.huggingface.co/models"
    inference_model: str = "microsoft/DialoGPT-medium"
    inference_timeout_seconds: float = 30.0

    # Structure inference
    page_text_max_chars: int = 1500
    default_prompt: str = "Extract all meaningful data"
    preview_limit: int = 5

    # Page rendering
    render_provider: str = "playwright"  # playwright | http
    render_timeout_ms: int = 30000
    render_wait_until: str = "networkidle"  # load | domcontentloaded | networkidle

    # App
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: str = "*"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = "logs"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]

    @property
    def ai_enabled(self) -> bool:
        return bool(self.huggingface_token.strip())


settings = Settings()
