"""
Field Encryption.

Note title, content and labels are stored encrypted. Services receive a
NoteCipher as an explicit collaborator; nothing in the ordering logic ever
compares or sorts ciphertext.
"""

from typing import Protocol

from cryptography.fernet import Fernet, InvalidToken

from notekeeper.core.exceptions import ApplicationError


class NoteCipher(Protocol):
    """Encrypts and decrypts individual text fields."""

    def encrypt(self, plaintext: str) -> str: ...

    def decrypt(self, ciphertext: str) -> str: ...


class FernetCipher:
    """
    NoteCipher backed by Fernet (AES-128-CBC with HMAC-SHA256).

    Ciphertexts are randomized, so equal plaintexts do not produce equal
    ciphertexts. Compare decrypted values, never stored ones.
    """

    def __init__(self, key: str | bytes) -> None:
        self._fernet = Fernet(key)

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        try:
            return self._fernet.decrypt(ciphertext.encode("ascii")).decode("utf-8")
        except InvalidToken as e:
            raise ApplicationError("Stored note could not be decrypted") from e
