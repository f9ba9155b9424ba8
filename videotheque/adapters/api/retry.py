"""
Mecanisme de retry avec backoff exponentiel pour les API externes.

Les reponses 429 (rate limiting) sont relancees : delai Retry-After s'il est
fourni (borne par max_wait), sinon backoff exponentiel avec jitter.

Usage:
    response = await request_with_retry(client, "GET", url, max_attempts=3)
"""

from typing import Callable, Optional

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)


class RateLimitError(Exception):
    """
    Exception levee quand l'API retourne 429 Too Many Requests.

    Attributes:
        retry_after: Secondes a attendre (header Retry-After), ou None.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Le header peut aussi etre une date HTTP : on l'ignore alors."""
    if not value:
        return None
    try:
        return max(0, int(value))
    except ValueError:
        return None


def wait_retry_after(max_wait: int) -> Callable[[RetryCallState], float]:
    """
    Strategie d'attente tenacity respectant Retry-After.

    Args:
        max_wait: Delai maximum entre deux tentatives (secondes)
    """
    fallback = wait_random_exponential(multiplier=1, min=1, max=max_wait)

    def _wait(retry_state: RetryCallState) -> float:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, RateLimitError) and exc.retry_after is not None:
            return float(min(exc.retry_after, max_wait))
        return fallback(retry_state)

    return _wait


def with_retry(max_attempts: int = 5, max_wait: int = 60):
    """
    Decorateur pour relancer sur RateLimitError.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 5)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 60)

    Returns:
        Decorateur a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_retry_after(max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 5,
    max_wait: int = 60,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry automatique sur 429.

    Les autres erreurs HTTP (4xx, 5xx) sont propagees immediatement.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP
        url: URL a appeler (relative a base_url du client)
        max_attempts: Nombre maximum de tentatives
        max_wait: Delai maximum entre deux tentatives
        **kwargs: Arguments passes a client.request()

    Raises:
        RateLimitError: Si 429 apres epuisement des tentatives
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
        httpx.TransportError: Erreur reseau
    """

    @with_retry(max_attempts=max_attempts, max_wait=max_wait)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            raise RateLimitError(_parse_retry_after(response.headers.get("Retry-After")))
        response.raise_for_status()
        return response

    return await _do_request()
