import secrets
import unittest

from dhproof.config import PRESETS, build_group
from dhproof.errors import InvalidPublicKey, VerificationFailed
from dhproof.keyagreement import DiffieHellman
from dhproof.keys import PrivateKey, Proof, PublicKey, SharedSecret
from dhproof.randomness import SystemRandomSource


class _FixedNonceSource(SystemRandomSource):
    """Hands out a known nonce so toy transcripts are reproducible."""

    def __init__(self, nonce: int) -> None:
        self.nonce = nonce

    def uniform_scalar(self, upper: int) -> int:
        return self.nonce


class TestToyScenario(unittest.TestCase):
    def setUp(self) -> None:
        self.dh = DiffieHellman(build_group(PRESETS["toy-23"]), random=_FixedNonceSource(3))
        self.alice = PrivateKey(6)
        self.bob = PrivateKey(7)

    def test_public_keys(self) -> None:
        self.assertEqual(self.dh.public_key(self.alice), PublicKey(18))
        self.assertEqual(self.dh.public_key(self.bob), PublicKey(13))

    def test_shared_secret_agrees(self) -> None:
        from_alice = self.dh.shared_secret(self.alice, PublicKey(13))
        from_bob = self.dh.shared_secret(self.bob, PublicKey(18))
        self.assertEqual(from_alice, from_bob)
        self.assertEqual(from_alice.element, pow(13, 6, 23))
        self.assertEqual(from_alice.element, 6)

    def test_proof_verifies(self) -> None:
        proof = self.dh.prove_shared_secret(self.alice, PublicKey(13))
        self.assertEqual(proof, Proof(t1=8, t2=12, challenge=4, response=1))
        self.assertEqual(self.dh.dump_proof(proof), b"\x08\x0c\x04\x01")
        verified = self.dh.verify_shared_secret(PublicKey(18), PublicKey(13), SharedSecret(6), proof)
        self.assertEqual(verified, SharedSecret(6))

    def test_corrupted_response_fails(self) -> None:
        proof = self.dh.prove_shared_secret(self.alice, PublicKey(13))
        corrupted = Proof(proof.t1, proof.t2, proof.challenge, (proof.response + 1) % 11)
        with self.assertRaises(VerificationFailed):
            self.dh.verify_shared_secret(PublicKey(18), PublicKey(13), SharedSecret(6), corrupted)

    def test_corrupted_challenge_fails(self) -> None:
        proof = self.dh.prove_shared_secret(self.alice, PublicKey(13))
        corrupted = Proof(proof.t1, proof.t2, (proof.challenge + 1) % 11, proof.response)
        with self.assertRaises(VerificationFailed):
            self.dh.verify_shared_secret(PublicKey(18), PublicKey(13), SharedSecret(6), corrupted)

    def test_wrong_shared_secret_fails(self) -> None:
        proof = self.dh.prove_shared_secret(self.alice, PublicKey(13))
        with self.assertRaises(VerificationFailed):
            self.dh.verify_shared_secret(PublicKey(18), PublicKey(13), SharedSecret(8), proof)


class TestDiffieHellman(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.group = build_group(PRESETS["rfc3526-2048"])
        cls.dh = DiffieHellman(cls.group)

    def setUp(self) -> None:
        self.alice = self.dh.generate()
        self.bob = self.dh.generate()
        self.alice_public = self.dh.public_key(self.alice)
        self.bob_public = self.dh.public_key(self.bob)

    def test_generated_key_in_range(self) -> None:
        self.assertTrue(0 < self.alice.scalar < self.group.order())
        self.assertNotIn(str(self.alice.scalar), repr(self.alice))

    def test_symmetry(self) -> None:
        self.assertEqual(
            self.dh.shared_secret(self.alice, self.bob_public),
            self.dh.shared_secret(self.bob, self.alice_public),
        )

    def test_completeness(self) -> None:
        expected = self.dh.shared_secret(self.alice, self.bob_public)
        proof = self.dh.prove_shared_secret(self.alice, self.bob_public)
        verified = self.dh.verify_shared_secret(self.alice_public, self.bob_public, expected, proof)
        self.assertEqual(verified, expected)

    def test_proofs_are_randomised(self) -> None:
        first = self.dh.prove_shared_secret(self.alice, self.bob_public)
        second = self.dh.prove_shared_secret(self.alice, self.bob_public)
        self.assertNotEqual(first, second)
        secret = self.dh.shared_secret(self.alice, self.bob_public)
        for proof in (first, second):
            self.dh.verify_shared_secret(self.alice_public, self.bob_public, secret, proof)

    def test_proof_bound_to_counterpart(self) -> None:
        carol = self.dh.generate()
        carol_public = self.dh.public_key(carol)
        proof = self.dh.prove_shared_secret(self.alice, self.bob_public)
        carol_secret = self.dh.shared_secret(self.alice, carol_public)
        with self.assertRaises(VerificationFailed):
            self.dh.verify_shared_secret(self.alice_public, carol_public, carol_secret, proof)

    def test_proof_bound_to_prover(self) -> None:
        secret = self.dh.shared_secret(self.alice, self.bob_public)
        proof = self.dh.prove_shared_secret(self.alice, self.bob_public)
        with self.assertRaises(VerificationFailed):
            self.dh.verify_shared_secret(self.bob_public, self.alice_public, secret, proof)

    def test_random_forgeries_rejected(self) -> None:
        g = self.group.generator()
        q = self.group.order()
        secret = self.dh.shared_secret(self.alice, self.bob_public)
        for _ in range(32):
            forged = Proof(
                t1=self.group.exponentiate(g, secrets.randbelow(q - 1) + 1),
                t2=self.group.exponentiate(g, secrets.randbelow(q - 1) + 1),
                challenge=secrets.randbelow(q),
                response=secrets.randbelow(q),
            )
            with self.assertRaises(VerificationFailed):
                self.dh.verify_shared_secret(self.alice_public, self.bob_public, secret, forged)

    def test_forgery_for_wrong_secret_rejected(self) -> None:
        # Honest transcript shape, but produced with a key unrelated to the claimed public key.
        mallory = self.dh.generate()
        fake_secret = self.dh.shared_secret(mallory, self.bob_public)
        proof = self.dh.prove_shared_secret(mallory, self.bob_public)
        with self.assertRaises(VerificationFailed):
            self.dh.verify_shared_secret(self.alice_public, self.bob_public, fake_secret, proof)

    def test_non_member_proof_elements_rejected(self) -> None:
        secret = self.dh.shared_secret(self.alice, self.bob_public)
        proof = self.dh.prove_shared_secret(self.alice, self.bob_public)
        p = self.group.params.p
        for bad in (0, 1, p - 1, p):
            with self.assertRaises(VerificationFailed):
                self.dh.verify_shared_secret(
                    self.alice_public,
                    self.bob_public,
                    secret,
                    Proof(bad, proof.t2, proof.challenge, proof.response),
                )
            with self.assertRaises(VerificationFailed):
                self.dh.verify_shared_secret(
                    self.alice_public, self.bob_public, SharedSecret(bad), proof
                )

    def test_out_of_range_scalars_rejected(self) -> None:
        secret = self.dh.shared_secret(self.alice, self.bob_public)
        proof = self.dh.prove_shared_secret(self.alice, self.bob_public)
        q = self.group.order()
        shifted = Proof(proof.t1, proof.t2, proof.challenge, proof.response + q)
        with self.assertRaises(VerificationFailed):
            self.dh.verify_shared_secret(self.alice_public, self.bob_public, secret, shifted)

    def test_invalid_public_keys_rejected_everywhere(self) -> None:
        p = self.group.params.p
        secret = self.dh.shared_secret(self.alice, self.bob_public)
        proof = self.dh.prove_shared_secret(self.alice, self.bob_public)
        for bad in (PublicKey(0), PublicKey(1), PublicKey(p - 1), PublicKey(p), PublicKey(p + 4)):
            with self.assertRaises(InvalidPublicKey):
                self.dh.shared_secret(self.alice, bad)
            with self.assertRaises(InvalidPublicKey):
                self.dh.prove_shared_secret(self.alice, bad)
            with self.assertRaises(InvalidPublicKey):
                self.dh.verify_shared_secret(bad, self.bob_public, secret, proof)
            with self.assertRaises(InvalidPublicKey):
                self.dh.verify_shared_secret(self.alice_public, bad, secret, proof)

    def test_seeded_generation_is_reproducible(self) -> None:
        first = self.dh.generate(b"fixture-seed")
        second = self.dh.generate(b"fixture-seed")
        other = self.dh.generate(b"another-seed")
        self.assertEqual(first, second)
        self.assertNotEqual(first, other)
        self.assertTrue(0 < first.scalar < self.group.order())

    def test_empty_seed_is_accepted(self) -> None:
        first = self.dh.generate(b"")
        self.assertEqual(first, self.dh.generate(b""))
        self.assertNotEqual(first, self.dh.generate(b"\x00"))
        self.assertTrue(0 < first.scalar < self.group.order())

    def test_dump_shared_secret_requires_member(self) -> None:
        p = self.group.params.p
        for bad in (0, 1, p - 1):
            with self.assertRaises(ValueError):
                self.dh.dump_shared_secret(SharedSecret(bad))
        secret = self.dh.shared_secret(self.alice, self.bob_public)
        self.assertEqual(len(self.dh.dump_shared_secret(secret)), self.group.element_size)

    def test_private_key_range_enforced(self) -> None:
        with self.assertRaises(ValueError):
            self.dh.public_key(PrivateKey(0))
        with self.assertRaises(ValueError):
            self.dh.shared_secret(PrivateKey(self.group.order()), self.bob_public)


if __name__ == "__main__":
    unittest.main()
