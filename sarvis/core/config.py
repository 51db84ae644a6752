# sarvis/core/config.py

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class SarvisConfig(BaseModel):
    """
    Configuration réutilisée par chaque requête du client.

    Le modèle reste mutable : le client le relit à chaque appel, une
    modification après construction est donc prise en compte immédiatement.
    """
    base_url: Optional[str]         = Field(None, description="Url utilisée pour chaque requête (ex https://api.example.com)")
    port: Optional[int]             = Field(None, description="(Optionnel) Port ajouté après l'url de base")
    base_path: Optional[str]        = Field(None, description="(Optionnel) Chemin de base de l'api, ex: /api, /v1")
    authorization: Optional[str]    = Field(None, description="(Optionnel) Valeur du header Authorization, "
                                                              "ex: 'Bearer YOUR_TOKEN'")

    @classmethod
    def from_env(cls, prefix: str = "SARVIS_") -> "SarvisConfig":
        """
        Construit la configuration depuis les variables d'environnement (et le .env).
        Ex: SARVIS_BASE_URL, SARVIS_PORT, SARVIS_BASE_PATH, SARVIS_AUTHORIZATION.
        """
        load_dotenv()
        values = {}
        for field_name in cls.model_fields:
            value = os.getenv(f"{prefix}{field_name.upper()}")
            if value:
                values[field_name] = value
        return cls(**values)
