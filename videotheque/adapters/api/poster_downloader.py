"""
Telechargement des posters vers le cache local de miniatures.
"""

import asyncio
import os
from concurrent.futures import Executor
from pathlib import Path
from typing import Optional

import httpx
from loguru import logger

from videotheque.core.errors import ExternalLookupError
from videotheque.core.ports.metadata import IPosterDownloader


class HttpPosterDownloader(IPosterDownloader):
    """
    Telecharge une image via httpx et l'ecrit de facon atomique.

    Le fichier est d'abord ecrit a cote de la destination (.part) puis
    renomme : une miniature partielle n'est jamais visible. L'ecriture
    tourne dans l'executor pour ne pas bloquer la boucle du scan.
    """

    def __init__(self, timeout: float = 10.0) -> None:
        self._timeout = timeout

    async def download(
        self, url: str, destination: Path, executor: Optional[Executor] = None
    ) -> Path:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ExternalLookupError(f"Poster inaccessible : {url} ({exc})") from exc

        content_type = response.headers.get("Content-Type", "")
        if content_type and not content_type.startswith("image/"):
            raise ExternalLookupError(f"Reponse non image pour {url} : {content_type}")

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(executor, _write_atomic, destination, response.content)
        except OSError as exc:
            raise ExternalLookupError(f"Ecriture du poster impossible : {exc}") from exc

        logger.debug("Poster telecharge", url=url, size=len(response.content))
        return destination


def _write_atomic(destination: Path, content: bytes) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = destination.with_suffix(destination.suffix + ".part")
    try:
        tmp_path.write_bytes(content)
        os.replace(tmp_path, destination)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
