import ecdsa
from Crypto.Hash import keccak

PRIVATE_KEY_HEX_LEN = 64
ADDRESS_HEX_LEN = 40


def eth_address_from_pubkey(pubkey_bytes: bytes) -> str:
    # Ethereum address = last 20 bytes of Keccak-256(pubkey), no 0x
    k = keccak.new(digest_bits=256)
    k.update(pubkey_bytes)
    return k.digest()[-20:].hex()


def generate_keypair():
    """Generate one secp256k1 keypair. Returns (private_key_hex, address_hex)."""
    sk = ecdsa.SigningKey.generate(curve=ecdsa.SECP256k1)
    # Uncompressed public key = 64 bytes (x || y)
    pubkey_bytes = sk.verifying_key.to_string()
    return sk.to_string().hex().zfill(PRIVATE_KEY_HEX_LEN), eth_address_from_pubkey(pubkey_bytes)
