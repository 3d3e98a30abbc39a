"""Symmetric encryption of persisted principals.

Uses Fernet symmetric encryption with a key derived from a configured
secret, so that cookies cannot be read or forged by clients.
"""

import base64
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ....core.exceptions import EncryptionError


class PrincipalEncryption:
    """Encrypt and decrypt principals stored in cookies."""
    
    SALT = b"TrustedAuthCookie"
    ITERATIONS = 100000
    
    def __init__(self, encryption_key: Optional[str]):
        """
        Initialize encryption with the provided key.
        
        Args:
            encryption_key: The secret the Fernet key is derived from
            
        Raises:
            EncryptionError: When no key is provided
        """
        if not encryption_key:
            raise EncryptionError(
                "A cookie encryption key is required, set TRUSTED_AUTH_ENCRYPTION_KEY",
                error_code="MISSING_ENCRYPTION_KEY",
            )
        self.cipher = self._get_cipher(encryption_key)
    
    def _get_cipher(self, encryption_key: str) -> Fernet:
        """Derive a Fernet cipher from the key string with PBKDF2."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=self.SALT,
            iterations=self.ITERATIONS,
        )
        derived_key = base64.urlsafe_b64encode(kdf.derive(encryption_key.encode("utf-8")))
        return Fernet(derived_key)
    
    def encrypt(self, text: str) -> str:
        """Encrypt a string into a URL-safe token."""
        return self.cipher.encrypt(text.encode("utf-8")).decode("utf-8")
    
    def decrypt(self, token: str, ttl: Optional[int] = None) -> str:
        """
        Decrypt a token.
        
        Args:
            token: The encrypted token
            ttl: Maximum token age in seconds, unbounded when None
            
        Returns:
            The decrypted string
            
        Raises:
            EncryptionError: When the token is invalid, tampered with or expired
        """
        try:
            return self.cipher.decrypt(token.encode("utf-8"), ttl=ttl).decode("utf-8")
        except (InvalidToken, UnicodeError) as e:
            raise EncryptionError("Failed to decrypt token", error_code="INVALID_TOKEN") from e
