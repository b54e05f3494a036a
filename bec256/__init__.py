"""secp256k1 field arithmetic, curve operations, keys and ECDSA signatures."""

__version__ = "0.1.0"

__all__ = ["curve", "field", "fieldmul", "fieldpow", "fieldsquare", "keys", "signature"]