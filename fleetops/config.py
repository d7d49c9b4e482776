from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./fleetops.sqlite3"
    api_key: str = ""  # empty = no auth check (local dev)
    log_level: str = "INFO"
    session_cookie_name: str = "sessionToken"
    session_cookie_max_age: int = 24 * 60 * 60  # client-side retention only
    bootstrap_leader_email: str = "contact@thegreenhands.fr"
    bootstrap_leader_password: str = "changeme-leader"
    bootstrap_leader_first_name: str = "Green"
    bootstrap_leader_last_name: str = "Hands"
    cors_origins: list[str] = ["http://localhost:8081", "http://localhost:19006"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
