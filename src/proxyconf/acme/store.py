"""JSON file store for ACME account and certificate data.

New-format files look like::

    {
      "Account": {"Email": "...", "Registration": {...},
                  "PrivateKey": "...", "KeyType": "..."},
      "Certificates": [
        {"Domain": {"Main": "...", "SANs": [...]},
         "Certificate": "...", "Key": "..."}
      ]
    }

Files written by the legacy ACME implementation keep the account at the
top level and certificates under ``DomainsCertificate.Certs``;
:func:`convert_to_new_format` upgrades them once at startup.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

_FILE_MODE = 0o600


class LocalStore:
    """ACME data persisted in a single JSON file.

    Parameters
    ----------
    filename:
        Path of the storage file.  It is created on first save.

    """

    def __init__(self, filename: str | Path) -> None:
        self.filename = Path(filename)
        self._data: dict[str, Any] | None = None

    def __repr__(self) -> str:
        return f"<LocalStore filename={str(self.filename)!r}>"

    # -- persistence --------------------------------------------------------

    def _load(self) -> dict[str, Any]:
        if self._data is None:
            if not self.filename.exists():
                self._data = {}
            else:
                text = self.filename.read_text(encoding="utf-8")
                data = json.loads(text) if text.strip() else {}
                if not isinstance(data, dict):
                    msg = f"ACME storage {self.filename} does not hold a JSON object"
                    raise ValueError(msg)
                self._data = data
        return self._data

    def write(self, data: dict[str, Any]) -> None:
        """Replace the whole store content with *data*."""
        self._data = data
        self._save()

    def _save(self) -> None:
        self.filename.parent.mkdir(parents=True, exist_ok=True)
        self.filename.write_text(
            json.dumps(self._data, indent=2),
            encoding="utf-8",
        )
        os.chmod(self.filename, _FILE_MODE)  # noqa: PTH101

    # -- account ------------------------------------------------------------

    def get_account(self) -> dict[str, Any] | None:
        return self._load().get("Account")

    def save_account(self, account: dict[str, Any]) -> None:
        self._load()["Account"] = account
        self._save()

    # -- certificates -------------------------------------------------------

    def get_certificates(self) -> list[dict[str, Any]]:
        return list(self._load().get("Certificates") or [])

    def save_certificates(self, certificates: list[dict[str, Any]]) -> None:
        self._load()["Certificates"] = certificates
        self._save()


def convert_to_new_format(filename: str | Path) -> bool:
    """Upgrade a legacy ACME storage file in place.

    The previous content is kept next to the file with a ``.bak``
    suffix.  Returns ``True`` when a conversion was written.
    """
    path = Path(filename)
    if not path.exists():
        log.debug("ACME storage %s does not exist yet, nothing to convert", path)
        return False

    try:
        text = path.read_text(encoding="utf-8")
        old = json.loads(text) if text.strip() else {}
    except (OSError, ValueError) as exc:
        log.error(
            "Failed to read ACME storage %s, data conversion is not available: %s",
            path,
            exc,
        )
        return False

    if not isinstance(old, dict):
        log.error(
            "ACME storage %s does not hold a JSON object, data conversion is not available",
            path,
        )
        return False
    if old.get("Account") is not None or not old.get("Email"):
        return False

    certificates = _convert_certificates(old, path)
    if certificates is None:
        return False

    account = {
        "Email": old["Email"],
        "Registration": old.get("Registration"),
        "PrivateKey": old.get("PrivateKey"),
        "KeyType": old.get("KeyType", ""),
    }

    backup = path.with_name(path.name + ".bak")
    try:
        shutil.copyfile(path, backup)
    except OSError as exc:
        log.error("Unable to create a backup of the legacy ACME storage %s: %s", path, exc)
        return False
    log.info("Backed up legacy ACME storage %s to %s", path, backup)

    try:
        LocalStore(path).write({"Account": account, "Certificates": certificates})
    except OSError as exc:
        log.error("Unable to write the converted ACME storage %s: %s", path, exc)
        return False

    log.info(
        "Converted ACME storage %s to the new format (%d certificates)",
        path,
        len(certificates),
    )
    return True


def _convert_certificates(old: dict[str, Any], path: Path) -> list[dict[str, Any]] | None:
    domains_certificate = old.get("DomainsCertificate") or {}
    if not isinstance(domains_certificate, dict) or not isinstance(
        domains_certificate.get("Certs") or [],
        list,
    ):
        log.error(
            "ACME storage %s has a malformed DomainsCertificate entry, "
            "data conversion is not available",
            path,
        )
        return None

    certificates = []
    for index, cert in enumerate(domains_certificate.get("Certs") or []):
        if not isinstance(cert, dict):
            log.warning("Skipping malformed certificate #%d in ACME storage %s", index, path)
            continue
        material = cert.get("Certificate")
        if not isinstance(material, dict):
            material = {}
        certificates.append(
            {
                "Domain": cert.get("Domains") or {},
                "Certificate": material.get("Certificate"),
                "Key": material.get("PrivateKey"),
            }
        )
    return certificates
