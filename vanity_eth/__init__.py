"""
vanity-eth: find an Ethereum address starting with a chosen prefix and
optionally encrypt its private key with a password.
"""

from .cipher import decrypt_string, derive_key, encrypt_string
from .errors import DecryptionError, GenerationFailure, InvalidCharacter, InvalidPrefix, VanityError
from .keys import generate_keypair
from .prefix import canonicalize
from .search import Match, ProgressReport, ThroughputSample, find_vanity_address

__version__ = "1.1.0"

__all__ = [
    "canonicalize",
    "find_vanity_address",
    "generate_keypair",
    "derive_key",
    "encrypt_string",
    "decrypt_string",
    "Match",
    "ProgressReport",
    "ThroughputSample",
    "VanityError",
    "InvalidPrefix",
    "InvalidCharacter",
    "DecryptionError",
    "GenerationFailure",
]
