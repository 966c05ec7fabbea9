"""ASCII armored OpenPGP signatures produced by the gpg executable."""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from artifact_publisher.modules.publishing.domain import SigningKey
from artifact_publisher.modules.publishing.exceptions import SigningFailure

from .base import Signer


class GpgSigner(Signer):
    """Signs with ``gpg --detach-sign --armor``.

    When the key carries in-memory material (an armored secret key) it is
    imported into a throwaway home directory that is removed on close, so
    the user's keyring is never touched. Otherwise the key is taken from
    ``homedir`` (or gpg's default keyring) by ``key_id``.
    """

    extension = ".asc"

    def __init__(
        self,
        key: SigningKey,
        *,
        executable: str = "gpg",
        homedir: Optional[str] = None,
        timeout: int = 60,
    ) -> None:
        self.key = key
        self.executable = executable
        self.homedir = homedir
        self.timeout = timeout
        self._temp_home: Optional[Path] = None
        self.log = logging.getLogger(self.__class__.__name__)
        if key.material is not None:
            self._import_key(key.material.get_secret_value())
        elif key.path is not None:
            try:
                material = Path(key.path).read_text(encoding="utf-8")
            except OSError as exc:
                raise SigningFailure(f"signing key not readable: {key.path}") from exc
            self._import_key(material)

    def _base_command(self) -> List[str]:
        command = [self.executable, "--batch", "--yes", "--no-tty"]
        home = str(self._temp_home) if self._temp_home else self.homedir
        if home:
            command += ["--homedir", home]
        return command

    def _import_key(self, material: str) -> None:
        self._temp_home = Path(tempfile.mkdtemp(prefix="publisher-gnupg-"))
        self._temp_home.chmod(0o700)
        self.log.info("Importing signing key into temporary keyring %s", self._temp_home)
        try:
            self._run(self._base_command() + ["--import"], material, "key import")
        except BaseException:
            self.close()
            raise

    def sign_file(self, path: Path) -> Path:
        target = self.signature_path(path)
        command = self._base_command()
        if self.key.key_id:
            command += ["--local-user", self.key.key_id]
        stdin_text = None
        if self.key.passphrase is not None:
            command += ["--pinentry-mode", "loopback", "--passphrase-fd", "0"]
            stdin_text = self.key.passphrase.get_secret_value()
        command += ["--armor", "--output", str(target), "--detach-sign", str(path)]
        self._run(command, stdin_text, f"signing {path.name}")
        return target

    def _run(self, command: List[str], stdin_text: Optional[str], label: str) -> None:
        try:
            completed = subprocess.run(
                command,
                input=stdin_text if stdin_text is not None else "",
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise SigningFailure(f"gpg executable not found: {self.executable}") from exc
        except OSError as exc:
            raise SigningFailure(f"cannot run gpg executable {self.executable}: {exc}") from exc
        except subprocess.TimeoutExpired as exc:
            raise SigningFailure(f"gpg {label} timed out after {self.timeout}s") from exc
        if completed.returncode != 0:
            detail = (completed.stderr or "").strip().splitlines()
            reason = detail[-1] if detail else f"exit status {completed.returncode}"
            raise SigningFailure(f"gpg {label} failed: {reason}")

    def close(self) -> None:
        if self._temp_home is not None:
            shutil.rmtree(self._temp_home, ignore_errors=True)
            self._temp_home = None
