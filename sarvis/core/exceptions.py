# sarvis/core/exceptions.py
from typing import Any


class APIError(Exception):
    """Erreur lors de l'appel d'une API externe"""
    pass


class RequestFailed(APIError):
    """
    Échec d'une requête, quelle qu'en soit la cause.

    `error` contient la valeur capturée telle quelle (exception levée ou
    réponse HTTP en échec), sans interprétation.
    """

    def __init__(self, message: str, error: Any = None):
        super().__init__(message)
        self.error = error


class TransportError(RequestFailed):
    """Erreur de connexion / timeout levée par le transport HTTP."""
    pass


class HTTPStatusError(RequestFailed):
    """Code de statut non success (4xx, 5xx). `response` est la réponse brute."""

    def __init__(self, response: Any):
        self.status_code = getattr(response, "status_code", None)
        super().__init__(f"HTTP {self.status_code}: request failed", error=response)

    @property
    def response(self) -> Any:
        return self.error


class ResponseParseError(RequestFailed):
    """Le body de la réponse n'est pas un JSON valide."""
    pass


class HookError(RequestFailed):
    """Exception levée par un hook use_before / use_after."""
    pass
