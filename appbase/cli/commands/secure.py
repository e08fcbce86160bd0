"""
Secure Data Commands
====================

``appbase secure ...``: manage secure data fields inside a configuration
document.

    appbase secure keygen
    appbase secure set database.password s3cret --suite CHACHA20-POLY1305
    appbase secure encrypt database.password
    appbase secure show database.password
    appbase secure decrypt database.password
    appbase secure status database.password

The master key is read from the environment variable named by --key-env
(APPBASE_MASTER_KEY by default), or prompted for when it is unset.
"""

from __future__ import annotations

import argparse
import getpass
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

from appbase.cli.application import Command, CommandContext
from appbase.core.config import (
    DEFAULT_SEARCH_PATHS,
    ConfigurationError,
    ConfigurationFile,
    get_field,
    set_field,
)
from appbase.core.crypto.kdf import generate_master_key
from appbase.core.crypto.suites import CipherSuite
from appbase.core.secure_data import SecureData, load_secure_data

DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_KEY_ENV = "APPBASE_MASTER_KEY"


def _add_document_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("field", help="dotted path of the field, e.g. database.password")
    parser.add_argument(
        "-c", "--config", default=DEFAULT_CONFIG_FILE,
        help=f"configuration file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--search-path", action="append", dest="search_paths", metavar="PATH",
        help="directory to search for the configuration file (repeatable)",
    )


def _add_key_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--key-env", default=DEFAULT_KEY_ENV,
        help=f"environment variable holding the hex master key (default: {DEFAULT_KEY_ENV})",
    )


def _master_key(args: argparse.Namespace) -> str:
    key = os.environ.get(args.key_env, "")
    if not key and sys.stdin.isatty():
        key = getpass.getpass("Master key: ")
    if not key:
        raise ConfigurationError(f"no master key available, set {args.key_env}")
    return key.strip()


class _Document:
    """A loaded configuration document and where it came from."""

    def __init__(self, args: argparse.Namespace) -> None:
        self.file = ConfigurationFile.new(args.config, args.search_paths or DEFAULT_SEARCH_PATHS)
        self.path: Path = self.file.resolve()
        self.data: dict[str, Any] = self.file.load(self.path)

    def field(self, field_path: str, required: bool = True) -> SecureData:
        value = get_field(self.data, field_path) if required else get_field(self.data, field_path, None)
        return load_secure_data(value)

    def store(self, field_path: str, field: SecureData) -> None:
        set_field(self.data, field_path, field.to_dict())
        self.file.save(self.data, self.path)


def _run_keygen(ctx: CommandContext, args: argparse.Namespace) -> int:
    ctx.echo(generate_master_key())
    return 0


def _run_set(ctx: CommandContext, args: argparse.Namespace) -> int:
    document = _Document(args)
    field = document.field(args.field, required=False)

    value: Optional[str] = args.value
    data = sys.stdin.buffer.read() if value == "-" else value.encode("utf-8")

    field.set_plaintext(data)
    if args.suite:
        field.cipher_suite = str(CipherSuite.parse(args.suite))
    elif not field.cipher_suite:
        field.cipher_suite = str(CipherSuite.AES_256_GCM)

    document.store(args.field, field)
    ctx.logger.info("Stored plaintext for %s in %s", args.field, document.path)
    return 0


def _run_encrypt(ctx: CommandContext, args: argparse.Namespace) -> int:
    document = _Document(args)
    field = document.field(args.field)
    field.encrypt(_master_key(args))
    document.store(args.field, field)
    ctx.logger.info("Encrypted %s in %s", args.field, document.path)
    return 0


def _run_decrypt(ctx: CommandContext, args: argparse.Namespace) -> int:
    document = _Document(args)
    field = document.field(args.field)
    field.decrypt(_master_key(args))
    document.store(args.field, field)
    ctx.logger.info("Decrypted %s in %s", args.field, document.path)
    return 0


def _run_show(ctx: CommandContext, args: argparse.Namespace) -> int:
    document = _Document(args)
    field = document.field(args.field)
    if field.is_encrypted:
        # decrypt a copy, the document on disk stays encrypted
        field = replace(field)
        field.decrypt(_master_key(args))
    ctx.echo(field.to_bytes().decode("utf-8", errors="replace"))
    return 0


def _run_status(ctx: CommandContext, args: argparse.Namespace) -> int:
    document = _Document(args)
    field = document.field(args.field)
    ctx.echo(f"state: {field.state.name.lower()}")
    ctx.echo(f"ciphersuite: {field.cipher_suite or '-'}")
    return 0


def _configure_set(parser: argparse.ArgumentParser) -> None:
    _add_document_arguments(parser)
    parser.add_argument("value", help="plaintext value, or - to read from stdin")
    parser.add_argument(
        "--suite", choices=[s.value for s in CipherSuite],
        help="cipher suite for the field (default: keep existing, else AES-256-GCM)",
    )


def _configure_keyed(parser: argparse.ArgumentParser) -> None:
    _add_document_arguments(parser)
    _add_key_argument(parser)


command = Command(
    name="secure",
    help="manage secure data fields",
    description="Set, encrypt, decrypt and inspect secure data fields in a configuration file.",
    subcommands=[
        Command(name="keygen", help="print a new hex master key", run=_run_keygen),
        Command(name="set", help="store plaintext in a field", run=_run_set, configure=_configure_set),
        Command(name="encrypt", help="encrypt a field", run=_run_encrypt, configure=_configure_keyed),
        Command(name="decrypt", help="decrypt a field", run=_run_decrypt, configure=_configure_keyed),
        Command(name="show", help="print a field's plaintext", run=_run_show, configure=_configure_keyed),
        Command(name="status", help="print a field's state", run=_run_status, configure=_add_document_arguments),
    ],
)
