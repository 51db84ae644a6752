# sarvis/client/request_client.py

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

from sarvis.core.config import SarvisConfig
from sarvis.core.exceptions import (
    HookError,
    HTTPStatusError,
    RequestFailed,
    ResponseParseError,
    TransportError,
)
from sarvis.core.logger import get_logger
from sarvis.core.transport import HttpxTransport

logger = get_logger(__name__)

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "TRACE", "HEAD", "CONNECT")

BeforeHook = Callable[[str, Dict[str, Any]], Tuple[str, Dict[str, Any]]]
AfterHook = Callable[[Any], Any]


@dataclass
class FetchResult:
    """Enveloppe {result, error} : un seul des deux champs est renseigné."""
    result: Any = None
    error: Optional[RequestFailed] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RequestClient:
    """
    Client HTTP léger partageant une configuration commune entre les requêtes.

    - url de base, port, chemin de base et header Authorization (SarvisConfig)
    - hooks optionnels : use_before(url, config) -> (url, config) et use_after(valeur) -> valeur
    - return_full_response : renvoie la réponse du transport au lieu du JSON parsé

    Toutes les erreurs (réseau, statut HTTP, JSON invalide, hook) sont levées
    sous la forme d'un RequestFailed qui porte la valeur capturée dans `error`.
    """

    def __init__(self, config: Union[SarvisConfig, Dict[str, Any], None] = None, transport=None):
        if config is None:
            config = SarvisConfig()
        elif isinstance(config, dict):
            config = SarvisConfig(**config)
        self.config = config

        # Transport injectable : tout async callable (url, options) -> réponse avec ok / json()
        self.transport = transport if transport is not None else HttpxTransport()

        self.use_before: Optional[BeforeHook] = None
        self.use_after: Optional[AfterHook] = None

        # Si True, renvoie la réponse avant extraction du JSON. Défaut = False.
        self.return_full_response: bool = False

        self.api_url: Optional[str] = self.create_api_url()

    # ---------------- Verbes HTTP ----------------
    async def get(self, url: str, custom_config: Optional[Dict[str, Any]] = None) -> Any:
        """
        Envoie une requête GET.

        :param url: chemin ajouté à l'url de base (si configurée)
        :param custom_config: options fusionnées par-dessus la config par défaut
        """
        return await self.request("GET", url, custom_config=custom_config)

    async def post(self, url: str, body: Any, custom_config: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", url, body, custom_config)

    async def put(self, url: str, body: Any, custom_config: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PUT", url, body, custom_config)

    async def patch(self, url: str, body: Any, custom_config: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PATCH", url, body, custom_config)

    async def delete(self, url: str, body: Any = None, custom_config: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("DELETE", url, body, custom_config)

    async def request(self, method: str, url: str, body: Any = None,
                      custom_config: Optional[Dict[str, Any]] = None) -> Any:
        """
        Compose l'url, fusionne la config et exécute la requête.
        Lève l'erreur de l'enveloppe si la requête a échoué, sinon renvoie le résultat.
        """
        # Relu à chaque appel : une modification de self.config est prise en compte
        self.api_url = self.create_api_url()

        config = {**self.get_basic_request_config(method, body), **(custom_config or {})}

        envelope = await self.fetch_request(self.get_api_url() + url, config)

        if envelope.error is not None:
            raise envelope.error

        return envelope.result

    # ---------------- Construction de la requête ----------------
    def get_basic_request_config(self, method: Optional[str] = None, body: Any = None) -> Dict[str, Any]:
        """
        Config de base utilisée par chaque requête.

        :param method: GET, PUT, POST, DELETE, PATCH, OPTIONS, TRACE, HEAD ou CONNECT (GET par défaut)
        :param body: n'importe quel objet sérialisable, converti en JSON avant envoi
        """
        method = (method or "GET").upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Méthode HTTP invalide : {method}")

        return {
            "method": method,
            "headers": self.basic_headers(),
            "body": json.dumps(body, separators=(",", ":")) if body is not None else None,
        }

    def basic_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        return self._with_auth_header(headers)

    def _with_auth_header(self, headers: Dict[str, str]) -> Dict[str, str]:
        if not self.config or not self.config.authorization:
            return headers

        headers["Authorization"] = self.config.authorization
        return headers

    def create_api_url(self) -> Optional[str]:
        """
        Url pré-composée pour chaque requête : base_url + ":" + port + base_path.
        Renvoie None si aucune base_url n'est configurée.
        """
        if not self.config or not self.config.base_url:
            return None

        url = self.config.base_url

        if self.config.port is not None:
            url = f"{url}:{self.config.port}"

        if self.config.base_path:
            url = url + self.config.base_path

        return url

    def get_api_url(self) -> str:
        return self.api_url or ""

    # ---------------- Exécution ----------------
    async def fetch_request(self, request_url: str, request_config: Dict[str, Any]) -> FetchResult:
        """
        Exécute le pipeline use_before -> transport -> use_after.
        Ne lève jamais de RequestFailed : l'échec est renvoyé dans l'enveloppe.
        """
        method = request_config.get("method") if isinstance(request_config, dict) else None
        try:
            if self.use_before:
                request_url, request_config = self._apply_use_before(request_url, request_config)
                # La méthode réellement envoyée est celle renvoyée par le hook
                method = request_config.get("method") if isinstance(request_config, dict) else None

            try:
                response = await self.transport(request_url, request_config)
            except Exception as e:
                raise TransportError(f"Impossible de joindre {request_url}: {e}", error=e) from e

            if not response.ok:
                raise HTTPStatusError(response)

            if self.return_full_response:
                result = response
            else:
                try:
                    result = response.json()
                except Exception as e:
                    raise ResponseParseError(f"Réponse JSON invalide pour {request_url}: {e}", error=e) from e

            if self.use_after:
                result = self._apply_use_after(result)

            return FetchResult(result=result)

        except HTTPStatusError as error:
            logger.warning(f"⚠️ {method} {request_url} -> HTTP {error.status_code}")
            return FetchResult(error=error)
        except RequestFailed as error:
            logger.error(f"❌ {method} {request_url} -> {type(error).__name__}: {error}")
            return FetchResult(error=error)
        except Exception as e:
            # Réponse du transport non conforme (ok absent, etc.)
            logger.error(f"❌ {method} {request_url} -> {type(e).__name__}: {e}")
            failure = RequestFailed(f"Requête échouée : {e}", error=e)
            failure.__cause__ = e
            return FetchResult(error=failure)

    def _apply_use_before(self, request_url: str, request_config: Dict[str, Any]):
        # Le retour du hook remplace url et config sans validation
        try:
            request_url, request_config = self.use_before(request_url, request_config)
        except Exception as e:
            raise HookError(f"Le hook use_before a échoué : {e}", error=e) from e
        return request_url, request_config

    def _apply_use_after(self, value: Any) -> Any:
        try:
            return self.use_after(value)
        except Exception as e:
            raise HookError(f"Le hook use_after a échoué : {e}", error=e) from e

    # ---------------- Cycle de vie ----------------
    async def aclose(self):
        """Fermeture propre du transport s'il expose aclose()."""
        close = getattr(self.transport, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


# Nom historique du client
Sarvis = RequestClient
