# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Click-based CLI for pdfformkit.

This module provides commands to add and fill form fields and to draw
stroke appearances onto existing annotations.
"""

# Standard Library
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path

# Third Party
import click
from colorama import Fore, Style, init
from pikepdf import Name

# Local
from . import __version__
from .annotations import AppearanceMode, apply_strokes
from .exceptions import (
    InternalFailureError,
    InvalidArgumentError,
    NotSupportedAnnotationTypeError,
    ResourceUnavailableError,
)
from .forms import (
    FieldDescriptor,
    FieldType,
    FormEnvironment,
    create_widget,
    find_field,
    set_button_state,
    set_field_value,
)
from .geometry import Color, Point, Rect, Stroke
from .store import DocumentStore
from .utils import setup_logging

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_FILE_NOT_FOUND = 2
EXIT_OPERATION_FAILED = 3
EXIT_INVALID_ARGUMENT = 4
EXIT_PERMISSION_ERROR = 5

_FIELD_TYPES = {ft.value: ft for ft in FieldType if ft is not FieldType.UNKNOWN}

_MODES = {
    "normal": AppearanceMode.NORMAL,
    "rollover": AppearanceMode.ROLL_OVER,
    "down": AppearanceMode.DOWN,
}

logger = logging.getLogger(__name__)


def print_success(msg: str) -> None:
    """Prints a success message in green.

    Args:
        msg: The message to output.
    """
    click.echo(f"{Fore.GREEN}✓{Style.RESET_ALL} {msg}")


def print_error(msg: str) -> None:
    """Prints an error message in red.

    Args:
        msg: The error message to output.
    """
    click.echo(f"{Fore.RED}✗ Error:{Style.RESET_ALL} {msg}", err=True)


def _run(action: Callable[[], int]) -> None:
    """Runs a command body and exits with the matching exit code."""
    try:
        exit_code = action()
    except FileNotFoundError as e:
        print_error(str(e))
        exit_code = EXIT_FILE_NOT_FOUND
    except PermissionError as e:
        print_error(f"Access denied: {e}")
        exit_code = EXIT_PERMISSION_ERROR
    except (InvalidArgumentError, NotSupportedAnnotationTypeError) as e:
        print_error(str(e))
        exit_code = EXIT_INVALID_ARGUMENT
    except (ResourceUnavailableError, InternalFailureError) as e:
        print_error(str(e))
        exit_code = EXIT_OPERATION_FAILED
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"Unexpected error: {e}")
        exit_code = EXIT_GENERAL_ERROR

    sys.exit(exit_code)


def _check_output(output: Path, force: bool) -> bool:
    if output.exists() and not force:
        print_error(f"Output file already exists: {output}. Use --force to overwrite.")
        return False
    return True


def load_strokes(path: Path) -> list[Stroke]:
    """Reads strokes from a JSON file.

    The file holds a list of objects with ``points`` (list of [x, y]),
    and optional ``width``, ``color`` ([r, g, b], 0-255) and ``closed``.

    Raises:
        InvalidArgumentError: If the file is not valid stroke JSON.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(f"Invalid stroke file {path.name}: {e}") from e
    if not isinstance(data, list):
        raise InvalidArgumentError("Stroke file must contain a JSON list")

    strokes = []
    try:
        for entry in data:
            points = [Point(float(x), float(y)) for x, y in entry["points"]]
            color = Color(*(int(c) for c in entry.get("color", (0, 0, 0))))
            strokes.append(
                Stroke.through(
                    points,
                    width=float(entry.get("width", 1.0)),
                    color=color,
                    closed=bool(entry.get("closed", False)),
                )
            )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Malformed stroke entry: {e}") from e
    return strokes


@click.group()
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Only output errors",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__)
def main(quiet: bool, verbose: bool) -> None:
    """Adds form fields and vector appearances to PDF files."""
    # Initialize colorama for Windows compatibility
    init()
    setup_logging(verbose=verbose, quiet=quiet)
    click.get_current_context().obj = {"quiet": quiet}


@main.command("add-field")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("-n", "--name", required=True, help="Field name (/T)")
@click.option(
    "-t",
    "--type",
    "field_type",
    type=click.Choice(sorted(_FIELD_TYPES)),
    required=True,
    help="Field type",
)
@click.option(
    "--rect",
    type=float,
    nargs=4,
    required=True,
    help="Widget rectangle: LEFT BOTTOM RIGHT TOP",
)
@click.option("-p", "--page", type=click.IntRange(min=1), default=1, help="Page number")
@click.option("--value", default=None, help="Default value")
@click.option("--max-length", type=click.IntRange(min=0), default=None)
@click.option("--quadding", type=click.IntRange(0, 2), default=None)
@click.option("--flags", type=int, default=0, help="Extra field flags (/Ff)")
@click.option("--option", "options", multiple=True, help="Choice option (repeatable)")
@click.option("-f", "--force", is_flag=True, help="Overwrite existing files")
def add_field(
    input_path: str,
    output: str,
    name: str,
    field_type: str,
    rect: tuple[float, float, float, float],
    page: int,
    value: str | None,
    max_length: int | None,
    quadding: int | None,
    flags: int,
    options: tuple[str, ...],
    force: bool,
) -> None:
    """Adds a form field widget.

    INPUT is the source PDF, OUTPUT the path for the modified copy.
    """
    quiet = click.get_current_context().obj["quiet"]
    descriptor = FieldDescriptor(
        name=name,
        field_type=_FIELD_TYPES[field_type],
        rect=Rect(*rect),
        options=options,
        max_length=max_length,
        quadding=quadding,
        default_value=value,
        extra_flags=flags,
    )

    def action() -> int:
        output_path = Path(output)
        if not _check_output(output_path, force):
            return EXIT_GENERAL_ERROR
        with DocumentStore.open(input_path) as store:
            session = FormEnvironment().init_session(store)
            create_widget(store, page - 1, session, descriptor)
            store.save(output_path)
        if not quiet:
            print_success(f"Added {field_type} field '{name}' -> {output_path.name}")
        return EXIT_SUCCESS

    _run(action)


@main.command("fill")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("-n", "--name", required=True, help="Fully qualified field name")
@click.option(
    "-v",
    "--value",
    "values",
    multiple=True,
    required=True,
    help="New value; repeat for multi-select list boxes. "
    "For checkboxes and radios, the state to select or Off.",
)
@click.option("-f", "--force", is_flag=True, help="Overwrite existing files")
def fill(
    input_path: str,
    output: str,
    name: str,
    values: tuple[str, ...],
    force: bool,
) -> None:
    """Sets the value of an existing form field.

    INPUT is the source PDF, OUTPUT the path for the modified copy.
    """
    quiet = click.get_current_context().obj["quiet"]

    def action() -> int:
        output_path = Path(output)
        if not _check_output(output_path, force):
            return EXIT_GENERAL_ERROR
        with DocumentStore.open(input_path) as store:
            field = find_field(store, name)
            if field is None:
                raise InvalidArgumentError(f"No field named '{name}'")
            if store.get_entry(field, "/FT") == Name.Btn:
                set_button_state(store, field, values[0])
            else:
                set_field_value(
                    store, field, values[0] if len(values) == 1 else list(values)
                )
            store.save(output_path)
        if not quiet:
            print_success(f"Filled field '{name}' -> {output_path.name}")
        return EXIT_SUCCESS

    _run(action)


@main.command("draw")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("output", type=click.Path(dir_okay=False))
@click.option(
    "-s",
    "--strokes",
    "strokes_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="JSON file with strokes (coordinates relative to the annotation)",
)
@click.option(
    "-a",
    "--annotation",
    type=click.IntRange(min=0),
    required=True,
    help="Zero-based annotation index on the page",
)
@click.option("-p", "--page", type=click.IntRange(min=1), default=1, help="Page number")
@click.option(
    "-m",
    "--mode",
    type=click.Choice(sorted(_MODES)),
    default="normal",
    show_default=True,
    help="Appearance to write",
)
@click.option("-f", "--force", is_flag=True, help="Overwrite existing files")
def draw(
    input_path: str,
    output: str,
    strokes_path: str,
    annotation: int,
    page: int,
    mode: str,
    force: bool,
) -> None:
    """Draws strokes as an annotation appearance.

    INPUT is the source PDF, OUTPUT the path for the modified copy.
    """
    quiet = click.get_current_context().obj["quiet"]

    def action() -> int:
        output_path = Path(output)
        if not _check_output(output_path, force):
            return EXIT_GENERAL_ERROR
        strokes = load_strokes(Path(strokes_path))
        with DocumentStore.open(input_path) as store:
            handles = store.annotations(page - 1)
            if annotation >= len(handles):
                raise InvalidArgumentError(
                    f"Page {page} has {len(handles)} annotation(s), "
                    f"no index {annotation}"
                )
            apply_strokes(store, handles[annotation], strokes, _MODES[mode])
            store.save(output_path)
        if not quiet:
            print_success(
                f"Drew {len(strokes)} stroke(s) on annotation {annotation} "
                f"-> {output_path.name}"
            )
        return EXIT_SUCCESS

    _run(action)


if __name__ == "__main__":
    main()
