from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".flashy" / "data"
    sqlite_filename: str = "flashy.db"
    host: str = "127.0.0.1"
    port: int = 0  # 0 = pick a free port at launch
    log_level: str = "info"
    cors_origins: list[str] = ["*"]

    # Reserved owner of the read-only starter decks; never a generated device id
    system_owner_id: str = "starter-decks-system"
    default_deck_color: str = "#6B4EFF"
    seed_starter_decks: bool = True

    # Client side
    device_id_file: Path = Path.home() / ".flashy" / "device_id"
    review_transition_delay: float = 0.3  # seconds between grade and next card

    model_config = {"env_prefix": "FLASHY_"}


settings = Settings()
