import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from dh_proof import main


class TestCommandLine(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        path = os.path.join(self._tmp.name, "directory.json")
        self.base = ["--directory", path, "--group", "rfc3526-2048"]

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *args: str) -> tuple:
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main([*self.base, *args])
        output = json.loads(stdout.getvalue()) if stdout.getvalue() else None
        return code, output, stderr.getvalue()

    def test_prove_and_verify(self) -> None:
        code, alice, _ = self._run("generate", "alice", "--seed", "01")
        self.assertEqual(code, 0)
        code, bob, _ = self._run("generate", "bob", "--seed", "02")
        self.assertEqual(code, 0)

        code, shared, _ = self._run("shared", bob["private_key"], "alice")
        self.assertEqual(code, 0)
        code, attestation, _ = self._run("prove", alice["private_key"], "bob")
        self.assertEqual(code, 0)
        self.assertEqual(attestation["shared_secret"], shared["shared_secret"])

        code, result, _ = self._run(
            "verify", "alice", "bob", attestation["shared_secret"], attestation["proof"]
        )
        self.assertEqual(code, 0)
        self.assertTrue(result["verified"])

        code, result, _ = self._run(
            "verify", "bob", "alice", attestation["shared_secret"], attestation["proof"]
        )
        self.assertEqual(code, 1)
        self.assertFalse(result["verified"])

    def test_corrupted_stored_key_reported(self) -> None:
        _, alice, _ = self._run("generate", "alice", "--seed", "01")
        self._run("generate", "bob", "--seed", "02")
        _, attestation, _ = self._run("prove", alice["private_key"], "bob")

        path = self.base[1]
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
        for raw_party in payload["parties"]:
            if raw_party.get("alias") == "bob":
                raw_party["public_key"] = "00" * 255 + "01"
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(payload, handle)

        code, output, error = self._run(
            "verify", "alice", "bob", attestation["shared_secret"], attestation["proof"]
        )
        self.assertEqual(code, 1)
        self.assertIsNone(output)
        self.assertIn("Error", error)

    def test_group(self) -> None:
        code, payload, _ = self._run("group")
        self.assertEqual(code, 0)
        self.assertEqual(payload["hash"], "sha256")

    def test_invalid_private_key_reported(self) -> None:
        code, _, _ = self._run("generate", "alice", "--seed", "01")
        self.assertEqual(code, 0)
        code, output, error = self._run("shared", "00" * 256, "alice")
        self.assertEqual(code, 1)
        self.assertIsNone(output)
        self.assertIn("Error", error)


if __name__ == "__main__":
    unittest.main()
