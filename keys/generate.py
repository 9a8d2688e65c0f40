"""Generate local development RSA and EC key pairs for asymmetric JWT signing."""

from __future__ import annotations

from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa


KEYS_DIR = Path(__file__).resolve().parent

# Key name -> config setting it feeds; ES256/ES384/ES512 each need their own curve.
KEY_SETTINGS = {
    "rsa": "JWT_RSA_PRIVATE_KEY",
    "ec-p256": "JWT_EC_P256_PRIVATE_KEY",
    "ec-p384": "JWT_EC_P384_PRIVATE_KEY",
    "ec-p521": "JWT_EC_P521_PRIVATE_KEY",
}

_EC_CURVES = {
    "ec-p256": ec.SECP256R1,
    "ec-p384": ec.SECP384R1,
    "ec-p521": ec.SECP521R1,
}


def key_paths(name: str) -> tuple[Path, Path]:
    """Return the ``(private, public)`` PEM paths for one key name."""
    return KEYS_DIR / f"dev.{name}.private.pem", KEYS_DIR / f"dev.{name}.public.pem"


def _new_private_key(name: str):
    if name == "rsa":
        return rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return ec.generate_private_key(_EC_CURVES[name]())


def write_key_pair(name: str) -> bool:
    """
    Write one key pair, skipping when both files already exist.

    Returns True when new files were written.
    """
    private_path, public_path = key_paths(name)
    private_exists = private_path.exists()
    public_exists = public_path.exists()

    if private_exists and public_exists:
        print(f"Keys already exist, skipping: {private_path} / {public_path}")
        return False

    if private_exists != public_exists:
        raise SystemExit(
            f"Only one {name} key file exists. Remove both and run this script again."
        )

    private_key = _new_private_key(name)
    private_path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    public_path.write_bytes(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    print(f"Generated: {private_path}")
    print(f"Generated: {public_path}")
    return True


def main() -> int:
    KEYS_DIR.mkdir(parents=True, exist_ok=True)
    for name, setting in KEY_SETTINGS.items():
        write_key_pair(name)
        print(f"  {setting}_PATH={key_paths(name)[0]}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
