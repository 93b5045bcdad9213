import logging

from pydantic import BaseModel, Field, field_validator


# ─── GENERATOR-DIENST ───

class ApiConfig(BaseModel):
    """Verbindung zum externen Generator-/Validator-Dienst.

    Das Zeitlimit ist fest (10 s) und deshalb NICHT konfigurierbar.
    """
    # Basis-URL des Dienstes, z.B. "http://localhost:8080"
    base_url: str = Field("http://localhost:8080",
        description="Basis-URL des Generator-Dienstes")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"base_url muss mit http:// oder https:// beginnen, nicht '{v}'")
        return v.rstrip("/")


# ─── SITZUNGSSPEICHER ───

class StorageConfig(BaseModel):
    """Ablage für letzte Eingabe, letzten Plan und letzte Validierung."""
    # Verzeichnis für die drei JSON-Slots (relativ zum Arbeitsverzeichnis)
    directory: str = Field(".vorlesungsplaner",
        description="Verzeichnis des Sitzungsspeichers")
    # False = nur flüchtiger Speicher (nichts wird über die Sitzung hinaus gehalten)
    enabled: bool = Field(True,
        description="Sitzungsspeicher aktiv")


# ─── GESAMT-CONFIG ───

class ClientConfig(BaseModel):
    """Gesamtkonfiguration des Clients."""
    # Verbindung zum Generator-Dienst
    api: ApiConfig = Field(default_factory=ApiConfig)
    # Sitzungsspeicher
    storage: StorageConfig = Field(default_factory=StorageConfig)
    # Log-Level (DEBUG, INFO, WARNING, ERROR)
    log_level: str = Field("WARNING",
        description="Log-Level der Konsolenausgabe")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unbekanntes Log-Level: {v}")
        return v

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)
