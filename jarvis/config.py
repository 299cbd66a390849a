from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".jarvis"
    goals_file: str = "goals.json"
    config_file: str = "config.json"

    buffer_minutes: int = 10  # Gap after every task, never after a fixed block

    log_level: str = "INFO"
    console_log_level: str = "WARNING"  # Keeps CLI output clean; the log file gets log_level
    log_json: bool = False  # JSON lines on the console as well as in the log file
    log_to_file: bool = True  # <data_dir>/logs/jarvis.log, rotated

    # `jarvis serve`
    host: str = "127.0.0.1"
    port: int = 3000

    model_config = {"env_file": ".env", "env_prefix": "JARVIS_", "extra": "ignore"}

    @property
    def goals_path(self) -> Path:
        return self.data_dir.expanduser() / self.goals_file

    @property
    def config_path(self) -> Path:
        return self.data_dir.expanduser() / self.config_file


settings = Settings()
