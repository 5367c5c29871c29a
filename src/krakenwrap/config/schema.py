# src/krakenwrap/config/schema.py
from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from krakenwrap.errors import ConfigError

TRANSLATE_SCRIPT = "kraken2_translate.py"
KRONA_SCRIPT = "kraken_to_krona.py"


class Settings(BaseModel):
    """Paths and executables read from the config file (KEY=value or YAML)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # databases / helper scripts
    kraken2_db: Path = Field(alias="KRAKEN2_DB")
    soft: Path = Field(alias="SOFT")

    # executables, resolved on PATH unless given as paths
    kraken2_bin: str = Field(default="kraken2", alias="KRAKEN2")
    kt_import_text_bin: str = Field(default="ktImportText", alias="KTIMPORTTEXT")

    @field_validator("kraken2_db", "soft", mode="before")
    @classmethod
    def _expand_user(cls, v):
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("path must not be empty")
            return Path(v).expanduser()
        return v

    @property
    def translate_script(self) -> Path:
        return self.soft / TRANSLATE_SCRIPT

    @property
    def krona_script(self) -> Path:
        return self.soft / KRONA_SCRIPT

    def validate_paths(self) -> None:
        if not self.soft.is_dir():
            raise ConfigError(
                f"The folder {self.soft} doesnt exist. Please make sure the helper scripts "
                "folder (SOFT) in your config file points at the kraken2 helper scripts."
            )
        for script in (self.translate_script, self.krona_script):
            if not script.is_file() or script.stat().st_size == 0:
                raise ConfigError(f"{script} is missing or empty. Check the SOFT folder in your config file.")
        if not self.kraken2_db.is_dir():
            raise ConfigError(
                f"The folder {self.kraken2_db} doesnt exist. Please consult the database guide "
                "to download and build the KRAKEN2 database"
            )
