"""imt command line: build a tree file, insert values, prove and verify absence.

Usage:
    imt init tree.json
    imt insert tree.json 10 30 50
    imt prove tree.json 25 > proof.json
    imt verify proof.json
    imt show tree.json
"""
import argparse
import json
import logging
import sys

from .errors import IMTError
from .hashing import BACKENDS, DEFAULT_DEPTH, get_hash
from .proof import NonMembershipProof, verify_non_membership_proof
from .tree import IndexedMerkleTree


def _value(s):
    try:
        return int(s, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {s}") from None


def cmd_init(args):
    tree = IndexedMerkleTree(depth=args.depth, hash2=get_hash(args.hash))
    tree.save_to_file(args.file)
    print(tree.root)
    return 0


def cmd_insert(args):
    tree = IndexedMerkleTree.load_from_file(args.file, get_hash(args.hash))
    tree.insert_many(args.values)
    tree.save_to_file(args.file)
    print(f"Inserted {len(args.values)} values, tree size {tree.size}.", file=sys.stderr)
    print(tree.root)
    return 0


def cmd_prove(args):
    tree = IndexedMerkleTree.load_from_file(args.file, get_hash(args.hash))
    proof = tree.create_non_membership_proof(args.value)
    print(json.dumps(proof.to_dict(), indent=4))
    return 0


def cmd_verify(args):
    with open(args.proof) as f:
        proof = NonMembershipProof.from_dict(json.load(f))
    if verify_non_membership_proof(proof, get_hash(args.hash), args.depth):
        print("okay")
        return 0
    print("rejected")
    return 1


def cmd_show(args):
    tree = IndexedMerkleTree.load_from_file(args.file, get_hash(args.hash))
    print(json.dumps({
        'depth': tree.depth,
        'size': tree.size,
        'root': str(tree.root),
        'values': [str(v) for v in tree.sorted_values()],
    }, indent=4))
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="imt",
        description="Indexed Merkle tree with non-membership proofs",
    )
    parser.add_argument("--hash", default="poseidon", choices=sorted(BACKENDS),
                        help="Hash backend (default: poseidon)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    sub = parser.add_subparsers(dest="command")

    p_init = sub.add_parser("init", help="Create an empty tree file")
    p_init.add_argument("file")
    p_init.add_argument("--depth", type=int, default=DEFAULT_DEPTH,
                        help=f"Tree depth (default: {DEFAULT_DEPTH})")

    p_insert = sub.add_parser("insert", help="Insert values into a tree file")
    p_insert.add_argument("file")
    p_insert.add_argument("values", nargs="+", type=_value)

    p_prove = sub.add_parser("prove", help="Print a non-membership proof for a value")
    p_prove.add_argument("file")
    p_prove.add_argument("value", type=_value)

    p_verify = sub.add_parser("verify", help="Verify a proof file")
    p_verify.add_argument("proof")
    p_verify.add_argument("--depth", type=int, default=DEFAULT_DEPTH,
                          help=f"Tree depth the proof was made for (default: {DEFAULT_DEPTH})")

    p_show = sub.add_parser("show", help="Print size, root and sorted values")
    p_show.add_argument("file")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "init": cmd_init,
        "insert": cmd_insert,
        "prove": cmd_prove,
        "verify": cmd_verify,
        "show": cmd_show,
    }

    try:
        return commands[args.command](args)
    except (IMTError, OSError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
