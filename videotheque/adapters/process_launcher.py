"""
Lancement detache du lecteur video via subprocess.
"""

import subprocess

from loguru import logger

from videotheque.core.ports.file_system import IProcessLauncher


class SubprocessLauncher(IProcessLauncher):
    """Lance le lecteur sans attendre sa fin, sorties redirigees vers DEVNULL."""

    def launch(self, command: list[str]) -> int:
        proc = subprocess.Popen(
            command,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        logger.debug("Processus lance", pid=proc.pid, executable=command[0])
        return proc.pid
