"""
YAML configuration loader with SOPS support.

Plain YAML files are read directly; files carrying SOPS metadata are
decrypted with the sops CLI first.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Any, Union

import yaml

SOPS_BINARY = "sops"


def decrypt_sops_file(file_path: Union[str, Path]) -> dict[str, Any]:
    """
    Decrypt a SOPS-encrypted YAML config and parse the plaintext.

    Args:
        file_path: Path to the encrypted file

    Returns:
        Decrypted configuration mapping

    Raises:
        FileNotFoundError: If file doesn't exist
        RuntimeError: If sops is missing or exits with an error
        ValueError: If the plaintext is not a YAML mapping
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Encrypted config file not found: {file_path}")

    command = [SOPS_BINARY, "--decrypt", "--output-type", "yaml", str(file_path)]
    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise RuntimeError(
            f"SOPS not installed: '{SOPS_BINARY}' is not on PATH. See "
            "https://github.com/getsops/sops/releases"
        ) from e

    if result.returncode != 0:
        raise RuntimeError(
            f"SOPS could not decrypt {file_path.name} "
            f"(exit {result.returncode}): {result.stderr.strip()}"
        )

    try:
        config = yaml.safe_load(result.stdout) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Decrypted {file_path.name} is not valid YAML: {e}") from e
    if not isinstance(config, dict):
        raise ValueError(f"Decrypted {file_path.name} must contain a mapping")
    return config
def load_config_file(file_path: Union[str, Path]) -> dict[str, Any]:
    """
    Load a YAML configuration file, decrypting it if it is SOPS-encrypted.

    Args:
        file_path: Path to the YAML file

    Returns:
        Configuration dictionary (empty for an empty file)

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the file is not valid YAML or not a mapping
        RuntimeError: If SOPS decryption fails
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {file_path}: {e}") from e

    if not isinstance(config, dict):
        raise ValueError(
            f"Config file {file_path} must contain a mapping, "
            f"got {type(config).__name__}"
        )

    if "sops" in config:
        config = decrypt_sops_file(file_path)

    return config


def check_sops_installed() -> bool:
    """Check if the sops binary is on PATH."""
    return shutil.which(SOPS_BINARY) is not None
