import argparse
import logging
import sys

from .cipher import decrypt_string, encrypt_string
from .config import load_settings
from .errors import DecryptionError, InvalidPrefix
from .prefix import canonicalize
from .search import find_vanity_address, validate_prefix

logger = logging.getLogger(__name__)

PROG = "vanity-eth"

USAGE = f"""\
Usage: {PROG} [options]
Available commands:
- Generate a random address not encrypted:
  {PROG}
- Generate a random address encrypted using a key:
  {PROG} --key <encryption-key>
- Generate a random address with a prefix not encrypted:
  {PROG} --prefix <prefix>
- Generate a random address with a prefix encrypted using a key:
  {PROG} --prefix <prefix> --key <encryption-key>
- Encrypt a string read from stdin using a key:
  {PROG} --encrypt <encryption-key>
- Decrypt a string read from stdin using a key:
  {PROG} --decrypt <encryption-key>
- Show help:
  {PROG} --help or {PROG} -h

The prefix may use letters that look like hex digits (e.g. "Bad" -> "8ad");
k, m, n, p, u, v, w, x and y cannot be used.
Environment: VANITY_WORKERS, VANITY_REPORT_INTERVAL, VANITY_START_METHOD, VANITY_LOG_LEVEL"""


VALUE_FLAGS = {
    "-p": "--prefix",
    "--prefix": "--prefix",
    "-k": "--key",
    "--key": "--key",
    "-e": "--encrypt",
    "--encrypt": "--encrypt",
    "-d": "--decrypt",
    "--decrypt": "--decrypt",
}


class UsageError(Exception):
    pass


class _Parser(argparse.ArgumentParser):
    # Malformed flags show the usage text instead of exiting with status 2
    def error(self, message):
        raise UsageError(message)


def create_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog=PROG, add_help=False)
    parser.add_argument("-p", "--prefix", default="")
    parser.add_argument("-k", "--key")
    parser.add_argument("-e", "--encrypt", dest="encryption_key")
    parser.add_argument("-d", "--decrypt", dest="decryption_key")
    parser.add_argument("-h", "--help", action="store_true")
    return parser


def show_help():
    print(USAGE)


def _read_line(message):
    print(message)
    try:
        return input()
    except EOFError:
        return None


def _banner(prefix, key):
    if not prefix and key is None:
        return "Generating random private key"
    if not prefix:
        return f'Generating random private key and encrypting it with key "{key}"'
    if key is None:
        return f"Generating private key for addresses starting with: {prefix}"
    return f'Generating private key for addresses starting with: {prefix} and encrypting it with key "{key}"'


def run_encrypt(key):
    line = _read_line("Enter the string to encrypt:")
    if line is None:
        print("Invalid input")
        return
    print(f"Encrypted string: {encrypt_string(line, key)}")


def run_decrypt(key):
    line = _read_line("Enter the string to decrypt:")
    if line is None:
        print("Invalid input")
        return
    try:
        print(f"Decrypted string: {decrypt_string(line, key)}")
    except DecryptionError as e:
        print(f"Decryption failed: {e}")


def run_generate(prefix, key, extra=()):
    """Canonicalize, search, print. Returns the exit status."""
    try:
        canonical = validate_prefix(canonicalize(prefix))
    except InvalidPrefix as e:
        print(f"Invalid prefix: {e}")
        return 1

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
    if extra:
        logger.debug("Ignoring arguments: %s", extra)

    print(_banner(prefix, key))
    match = find_vanity_address(
        canonical,
        workers=settings.workers,
        interval=settings.report_interval,
        start_method=settings.start_method,
    )
    print(f"Address: 0x{match.address}")
    if key is None:
        print(f"Private key not encrypted: {match.private_key}")
    else:
        print(f'Private key encrypted with key "{key}": {encrypt_string(match.private_key, key)}')
    return 0


def attach_values(argv):
    """
    Glue each value flag to the token after it ("-k", "-x" -> "--key=-x"),
    so values starting with "-" are not mistaken for flags.
    """
    joined = []
    tokens = iter(argv)
    for token in tokens:
        value = next(tokens, None) if token in VALUE_FLAGS else None
        if value is None:
            # a trailing value flag stays bare and shows the usage text
            joined.append(token)
        else:
            joined.append(f"{VALUE_FLAGS[token]}={value}")
    return joined


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    try:
        args, extra = create_parser().parse_known_args(attach_values(argv))
    except UsageError:
        show_help()
        return 0
    if args.help:
        show_help()
        return 0

    if args.encryption_key is not None:
        run_encrypt(args.encryption_key)
        return 0
    if args.decryption_key is not None:
        run_decrypt(args.decryption_key)
        return 0
    return run_generate(args.prefix, args.key, extra)


if __name__ == "__main__":
    sys.exit(main())
