"""Command line interface for Passport file decryption."""

from __future__ import annotations

import getpass
import logging
from contextlib import ExitStack
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import IO, Callable

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from passport_decrypt import __version__
from passport_decrypt.crypto.cbc import validate_chunk_size
from passport_decrypt.decryption import STREAM_CHUNK_SIZE, FileCredentials, check_file, decrypt_file
from passport_decrypt.errors import (
    IntegrityFailure,
    InvalidEncodingError,
    InvalidStreamError,
    NullArgumentError,
)

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_CIPHER = 2
EXIT_FS = 3
EXIT_INTEGRITY = 4

STDIN_MARKER = "-"

console = Console()
logger = logging.getLogger(__name__)


def _package_version() -> str:
    try:
        return version("passport-decrypt")
    except PackageNotFoundError:
        return __version__


def _prompt_value(value: str | None, label: str) -> str:
    if value is not None:
        return value
    return getpass.getpass(f"{label}: ")


def _human_size(num: float) -> str:
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if num < 1024 or unit == "TB":
            return f"{num:.1f} {unit}" if unit != "B" else f"{int(num)} {unit}"
        num /= 1024
    return f"{num:.1f} TB"


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _open_source(source: str) -> tuple[IO[bytes], bool]:
    """Return the source stream and whether the caller must close it."""
    if source == STDIN_MARKER:
        return click.get_binary_stream("stdin"), False
    return Path(source).open("rb"), True


def _handle_action(action: Callable[[], None]) -> int:
    try:
        action()
    except IntegrityFailure as exc:
        console.print(f"[red]Integrity check failed:[/red] {exc}")
        return EXIT_INTEGRITY
    except InvalidEncodingError as exc:
        console.print(f"[red]Invalid credentials:[/red] {exc}")
        return EXIT_USAGE
    except (NullArgumentError, InvalidStreamError) as exc:
        console.print(f"[red]Invalid arguments:[/red] {exc}")
        return EXIT_USAGE
    except FileExistsError as exc:
        console.print(f"[red]{exc}. Use --overwrite to replace.[/red]")
        return EXIT_FS
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/red] {exc}")
        return EXIT_FS
    except PermissionError as exc:
        console.print(f"[red]Permission denied:[/red] {exc}")
        return EXIT_FS
    except OSError as exc:  # noqa: BLE001
        console.print(f"[red]Filesystem error:[/red] {exc}")
        return EXIT_FS
    except ValueError as exc:
        console.print(f"[red]Decryption failed:[/red] {exc}")
        return EXIT_CIPHER
    return EXIT_SUCCESS


def _credential_options(fn: Callable[..., None]) -> Callable[..., None]:
    fn = click.option(
        "--file-hash",
        "file_hash_opt",
        envvar="PASSDEC_FILE_HASH",
        help="Base64 file_hash from FileCredentials (env PASSDEC_FILE_HASH, prompts if omitted).",
    )(fn)
    fn = click.option(
        "--secret",
        "secret_opt",
        envvar="PASSDEC_SECRET",
        help="Base64 secret from FileCredentials (env PASSDEC_SECRET, prompts if omitted).",
    )(fn)
    return fn


def _check_chunk_size(_ctx: click.Context, _param: click.Parameter, value: int) -> int:
    try:
        return validate_chunk_size(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


_chunk_size_option = click.option(
    "--chunk-size",
    type=int,
    callback=_check_chunk_size,
    default=STREAM_CHUNK_SIZE,
    show_default=True,
    help="Read size in bytes; must be a multiple of 16.",
)


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=False,
)
@click.version_option(version=_package_version(), prog_name="Passport Decrypt")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log decryption steps to stderr.")
def cli(verbose: bool) -> None:
    """Decrypt Telegram Passport files with their FileCredentials."""
    _configure_logging(verbose)


@cli.command(
    help="Decrypt an encrypted Passport file.",
    epilog="Examples:\n  passdec decrypt selfie.jpg.enc selfie.jpg --secret ... --file-hash ...\n  cat selfie.jpg.enc | passdec decrypt - selfie.jpg",
)
@click.argument("source", type=click.Path(allow_dash=True, dir_okay=False))
@click.argument("output_path", type=click.Path(path_type=Path, dir_okay=False))
@_credential_options
@_chunk_size_option
@click.option(
    "--overwrite/--no-overwrite",
    default=False,
    help="Overwrite output if it already exists.",
)
@click.pass_context
def decrypt(
    ctx: click.Context,
    source: str,
    output_path: Path,
    secret_opt: str | None,
    file_hash_opt: str | None,
    chunk_size: int,
    overwrite: bool,
) -> None:
    credentials = FileCredentials(
        secret=_prompt_value(secret_opt, "Secret"),
        file_hash=_prompt_value(file_hash_opt, "File hash"),
    )

    def _run() -> None:
        if output_path.exists() and not overwrite:
            raise FileExistsError(f"Refusing to overwrite existing file: {output_path}")
        with ExitStack() as stack:
            src, owned = _open_source(source)
            if owned:
                stack.enter_context(src)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            dest = stack.enter_context(output_path.open("wb"))
            try:
                decrypt_file(src, credentials, dest, chunk_size=chunk_size)
            except Exception:
                stack.close()
                logger.debug("Removing partial output %s", output_path)
                output_path.unlink(missing_ok=True)
                raise

    code = _handle_action(_run)
    if code == EXIT_SUCCESS:
        size = output_path.stat().st_size
        console.print(f"[green]Decrypted to[/green] {output_path} (~{_human_size(size)}).")
    ctx.exit(code)


@cli.command(
    help="Verify padding and content hash of an encrypted Passport file without writing it.",
    epilog="Example:\n  passdec check selfie.jpg.enc --secret ... --file-hash ...",
)
@click.argument("source", type=click.Path(allow_dash=True, dir_okay=False))
@_credential_options
@_chunk_size_option
@click.pass_context
def check(
    ctx: click.Context,
    source: str,
    secret_opt: str | None,
    file_hash_opt: str | None,
    chunk_size: int,
) -> None:
    credentials = FileCredentials(
        secret=_prompt_value(secret_opt, "Secret"),
        file_hash=_prompt_value(file_hash_opt, "File hash"),
    )

    def _run() -> None:
        with ExitStack() as stack:
            src, owned = _open_source(source)
            if owned:
                stack.enter_context(src)
            content_len = check_file(src, credentials, chunk_size=chunk_size)

        table = Table(show_header=False, box=None)
        table.add_row("Source", "stdin" if source == STDIN_MARKER else source)
        table.add_row("Content size", _human_size(content_len))
        table.add_row("Content hash", "matches file_hash")
        console.print("[bold]File check[/bold]")
        console.print(table)
        console.print("[green]Integrity verified.[/green]")

    ctx.exit(_handle_action(_run))


@cli.command(name="version", help="Show the installed version.")
def version_cmd() -> None:
    console.print(f"Passport Decrypt {_package_version()}")


def main(argv: list[str] | None = None) -> int:
    try:
        return cli.main(args=argv, prog_name="passdec", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except SystemExit as exc:  # noqa: TRY003
        code = exc.code if isinstance(exc.code, int) else EXIT_USAGE
        return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
