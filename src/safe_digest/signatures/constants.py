"""
Safe Signature Layout Constants

Byte sizes and ``v`` markers of the concatenated owner-signature format
checked by ``Safe.checkNSignatures``.
"""

#: r (32) + s (32) + v (1)
SIGNATURE_LENGTH_BYTES = 65
SIGNATURE_HEX_LENGTH = SIGNATURE_LENGTH_BYTES * 2

#: Big-endian length word in front of every contract-signature payload
DYNAMIC_PART_LENGTH_FIELD_BYTES = 32
DYNAMIC_PART_LENGTH_FIELD_HEX_LENGTH = DYNAMIC_PART_LENGTH_FIELD_BYTES * 2

WORD_BYTES = 32
ADDRESS_BYTES = 20

CONTRACT_SIGNATURE_V = 0
APPROVED_HASH_V = 1

# eth_sign signatures carry v + 4 (31 / 32)
ETH_SIGN_V_THRESHOLD = 30
ETH_SIGN_V_OFFSET = 4
