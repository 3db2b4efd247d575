"""
Main CLI entry point for lookups.

Builds lookup tables from YAML/JSON record files and queries them:

    lookups query counties.yaml --by state --by county MS Greene
    lookups show counties.yaml --by state --by county
    lookups config
"""

import contextlib as _contextlib
import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.text as _rich_text
import rich.tree as _rich_tree
import yaml as _yaml

import lookups
import lookups.config as config
import lookups.errors as errors
import lookups.records as records
import lookups.table as table

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

ACCESS_MODES = ("hunt", "find", "get")


@_contextlib.contextmanager
def _reported_errors() -> _typing.Iterator[None]:
    """Turn library errors into clean CLI failures (exit code 1)."""
    try:
        yield
    except (errors.LookupsError, records.RecordFileError, config.ConfigFileError) as e:
        raise _click.ClickException(str(e)) from e


def _load_settings() -> config.Settings:
    try:
        return config.Settings()
    except config.ConfigFileError as e:
        raise _click.ClickException(str(e)) from e
    except _pydantic.ValidationError as e:
        raise _click.ClickException(f"Invalid configuration:\n{e}") from e


def _build_table(
    settings: config.Settings,
    path: _pathlib.Path,
    keys: tuple[str, ...],
    select: str | None,
    on_duplicate: str | None,
    default: str | None,
) -> table.LookupTable:
    rows = records.load_records(path)
    builder = table.from_source(rows, settings=settings).by(*keys)
    if select:
        builder.select(select)
    if on_duplicate:
        builder.on_duplicate(on_duplicate)
    if default is not None:
        builder.default_to(records.parse_scalar(default))
    return builder.index()


def _format_value(value: _typing.Any, output_format: str) -> str:
    """Serialize a query result for printing."""
    if isinstance(value, table.LookupTable):
        value = value.to_dict()
    if output_format == "json":
        return _json.dumps(value, indent=2, default=str)
    if isinstance(value, (dict, list)):
        return _yaml.safe_dump(value, default_flow_style=False, sort_keys=False).rstrip()
    if value is None or isinstance(value, bool):
        return _json.dumps(value)
    return str(value)


def _make_console(settings: config.Settings) -> _rich_console.Console:
    color = settings.output.color
    return _rich_console.Console(
        force_terminal=True if color else None,
        no_color=color is False,
        highlight=False,
    )


def _add_branches(node: _rich_tree.Tree, lookup: table.LookupTable) -> None:
    for key, value in lookup.items():
        if lookup.is_leaf:
            label = _rich_text.Text(f"{key!r}: ", style="bold")
            label.append(errors.short_repr(value))
            node.add(label)
        else:
            branch = node.add(_rich_text.Text(repr(key), style="bold cyan"))
            _add_branches(branch, value)


# Options shared by the commands that build a table
def _table_options(func: _typing.Callable[..., _typing.Any]) -> _typing.Callable[..., _typing.Any]:
    decorators = [
        _click.argument(
            "record_file",
            type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path),
        ),
        _click.option(
            "-k",
            "--by",
            "keys",
            multiple=True,
            required=True,
            help="Property path to index by; repeat once per level, outermost first",
        ),
        _click.option("--select", type=str, default=None, help="Property path to store instead of the record"),
        _click.option(
            "--on-duplicate",
            type=_click.Choice([d.value for d in table.Duplication]),
            default=None,
            help="Policy for records sharing a leaf key (default from settings)",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(lookups.__version__, "-v", "--version", prog_name="lookups")
@_click.option("--verbose", is_flag=True, help="Log build details to stderr")
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool) -> None:
    """Lookups - build and query multi-level lookup tables from record files."""
    if verbose:
        _logging.basicConfig(level=_logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["settings"] = _load_settings()


@cli.command()
@_table_options
@_click.option("--default", "default", type=str, default=None, help="Leaf default for --mode get")
@_click.option(
    "--mode",
    type=_click.Choice(ACCESS_MODES),
    default="hunt",
    show_default=True,
    help="hunt: fail if absent; find: null if absent; get: fall back to the default",
)
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.argument("key_values", metavar="KEY...", nargs=-1, required=True)
@_click.pass_context
def query(
    ctx: _click.Context,
    record_file: _pathlib.Path,
    keys: tuple[str, ...],
    select: str | None,
    on_duplicate: str | None,
    default: str | None,
    mode: str,
    as_json: bool,
    key_values: tuple[str, ...],
) -> None:
    """Look up one KEY per level in a table built from RECORD_FILE.

    KEY values are parsed as YAML scalars, so 28041 matches an integer.

    Examples:
        lookups query counties.yaml -k state -k county MS Greene
        lookups query counties.yaml -k code --select county 28041
        lookups query counties.yaml -k state -k county --select code --mode get --default 0 XX Greene
    """
    settings: config.Settings = ctx.obj["settings"]
    if len(key_values) != len(keys):
        raise _click.UsageError(
            f"Expected {len(keys)} key value(s), one per --by level, got {len(key_values)}"
        )

    with _reported_errors():
        lookup = _build_table(settings, record_file, keys, select, on_duplicate, default)
        value: _typing.Any = lookup
        for text in key_values:
            key = records.parse_scalar(text)
            if mode == "hunt":
                value = value.hunt(key)
            elif mode == "find":
                value = value.find(key)
            else:
                value = value.get_or_default(key)
            if not isinstance(value, table.LookupTable):
                break

    output_format = "json" if as_json else settings.output.format
    _click.echo(_format_value(value, output_format))


@cli.command()
@_table_options
@_click.pass_context
def show(
    ctx: _click.Context,
    record_file: _pathlib.Path,
    keys: tuple[str, ...],
    select: str | None,
    on_duplicate: str | None,
) -> None:
    """Print the table built from RECORD_FILE as a tree."""
    settings: config.Settings = ctx.obj["settings"]
    with _reported_errors():
        lookup = _build_table(settings, record_file, keys, select, on_duplicate, None)

    title = _rich_text.Text(
        f"{record_file.name} by {' > '.join(keys)} ({len(lookup)} keys)",
        style="bold",
    )
    tree = _rich_tree.Tree(title)
    _add_branches(tree, lookup)
    _make_console(settings).print(tree)


@cli.command(name="config")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def config_cmd(ctx: _click.Context, as_json: bool) -> None:
    """Show effective configuration from all sources."""
    settings: config.Settings = ctx.obj["settings"]
    data = settings.model_dump(mode="json")

    output_format = "json" if as_json else settings.output.format
    _click.echo(_format_value(data, output_format))

    for path, value in settings.collect_all_extra_fields().items():
        _click.echo(f"Warning: unknown config key {path!r} (value {value!r})", err=True)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="lookups")


if __name__ == "__main__":
    main()
