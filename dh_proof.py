"""Command line interface for Diffie-Hellman shared secret proofs."""

from __future__ import annotations

import argparse
import json
import sys

from dhproof.config import build_key_agreement, configure_logging, directory_path
from dhproof.directory import PublicKeyDirectory
from dhproof.errors import DHProofError
from dhproof.exchange import (
    attest_shared_secret,
    check_attestation,
    derive_shared_secret,
    register_party,
)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--directory",
        default=directory_path(),
        help="Location of the public-key directory (default: $DHPROOF_DIRECTORY or directory.json)",
    )
    parser.add_argument(
        "--group",
        help="Group preset (rfc3526-2048, toy-23) or path to a JSON parameter file",
    )
    parser.add_argument(
        "--fixture",
        action="store_true",
        help="Use the insecure fixture key agreement instead of Diffie-Hellman",
    )
    parser.add_argument("--log-level", help="Logging level (default: $DHPROOF_LOG_LEVEL or WARNING)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("group", help="Show the configured group parameters")

    generate_parser = subparsers.add_parser("generate", help="Generate and publish a key pair")
    generate_parser.add_argument(
        "alias",
        nargs="?",
        help="Optional human friendly alias for the party",
    )
    generate_parser.add_argument(
        "--seed",
        help="Hex-encoded seed for a reproducible key. If omitted a random key is drawn.",
    )

    shared_parser = subparsers.add_parser("shared", help="Derive the shared secret with a party")
    shared_parser.add_argument("private_key", help="Hex-encoded private key")
    shared_parser.add_argument("remote", help="Party id or alias of the counterpart")

    prove_parser = subparsers.add_parser(
        "prove",
        help="Derive the shared secret with a party and prove it to a third party",
    )
    prove_parser.add_argument("private_key", help="Hex-encoded private key")
    prove_parser.add_argument("remote", help="Party id or alias of the counterpart")

    verify_parser = subparsers.add_parser("verify", help="Check a shared secret proof")
    verify_parser.add_argument("prover", help="Party id or alias of the prover")
    verify_parser.add_argument("remote", help="Party id or alias of the counterpart")
    verify_parser.add_argument("shared_secret", help="Hex-encoded shared secret claimed by the prover")
    verify_parser.add_argument("proof", help="Hex-encoded proof")

    return parser.parse_args(argv)


def load_directory(namespace: argparse.Namespace) -> PublicKeyDirectory:
    key_agreement = build_key_agreement(namespace.group, fixture=namespace.fixture)
    return PublicKeyDirectory(namespace.directory, key_agreement)


def run(namespace: argparse.Namespace) -> dict:
    directory = load_directory(namespace)
    key_agreement = directory.key_agreement

    if namespace.command == "group":
        return key_agreement.describe()

    if namespace.command == "generate":
        seed = bytes.fromhex(namespace.seed) if namespace.seed else None
        return register_party(directory, namespace.alias, seed)

    if namespace.command == "shared":
        return derive_shared_secret(directory, namespace.private_key, namespace.remote)

    if namespace.command == "prove":
        return attest_shared_secret(directory, namespace.private_key, namespace.remote)

    if namespace.command == "verify":
        return check_attestation(
            directory,
            {
                "prover": namespace.prover,
                "remote": namespace.remote,
                "shared_secret": namespace.shared_secret,
                "proof": namespace.proof,
            },
        )

    raise RuntimeError("Unreachable")


def main(argv: list[str] | None = None) -> int:
    namespace = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(namespace.log_level)

    try:
        payload = run(namespace)
    except (DHProofError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(payload, indent=2))
    if namespace.command == "verify" and not payload["verified"]:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
