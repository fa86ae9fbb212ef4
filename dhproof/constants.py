"""Group parameters and protocol constants."""

# RFC 3526, 2048-bit MODP group (id 14). p is a safe prime, so the
# quadratic residues form a subgroup of prime order q = (p - 1) / 2, and
# 2 generates it because p = 7 (mod 8).
RFC3526_2048_P = int(
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3D"
    "C2007CB8A163BF0598DA48361C55D39A69163FA8FD24CF5F"
    "83655D23DCA3AD961C62F356208552BB9ED529077096966D"
    "670C354E4ABC9804F1746C08CA18217C32905E462E36CE3B"
    "E39E772C180E86039B2783A2EC07A28FB5C55DF06F4C52C9"
    "DE2BCBF6955817183995497CEA956AE515D2261898FA0510"
    "15728E5A8AACAA68FFFFFFFFFFFFFFFF",
    16,
)
RFC3526_2048_Q = (RFC3526_2048_P - 1) // 2
RFC3526_2048_G = 2

# Tiny safe-prime group for worked examples. Never use it for real keys.
TOY_P = 23
TOY_Q = 11
TOY_G = 2

DEFAULT_GROUP = "rfc3526-2048"

CHALLENGE_TAG = b"dhproof/chaum-pedersen/v1"
SEED_TAG = b"dhproof/seed/v1"
DEFAULT_HASH = "sha256"

# Extra random bits mixed into secret exponents as a multiple of the order.
BLINDING_BITS = 64

PRIMALITY_ROUNDS = 40

FIXTURE_KEY_SIZE = 32
