# configset/cli.py

import json
import logging

import click

from .exceptions import ConfigSetError, ValueNotFound
from .fs import LocalFileReader
from .loader import DEFAULT_PREFIX, DEFAULT_SUFFIX, ConfigSet
from .utils import dotenv_lines, environ_lines


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-d", "--dir", "dir_path", required=True, help="Directory holding the *.yaml files")
@click.option("-p", "--prefix", default=DEFAULT_PREFIX, show_default=True,
              help="Env-var prefix for overrides")
@click.option("--suffix", default=DEFAULT_SUFFIX, show_default=True, help="Config file suffix")
@click.option("--dotenv", "dotenv_path", help="Read overrides from this .env file too")
@click.option("--no-env", is_flag=True, help="Ignore overrides in the process environment")
@click.option("-v", "--verbose", is_flag=True, help="Log loading steps to stderr")
@click.pass_context
def cli(ctx, dir_path, prefix, suffix, dotenv_path, no_env, verbose):
    """
    configset CLI: inspect a directory of YAML configs plus env overrides.

    Load a directory (`-d /etc/myapp`), then run subcommands:
      • dump      [--indent STR] [--line-prefix STR]
      • get       PATH
      • exists    PATH
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    environment = [] if no_env else environ_lines()
    cs = ConfigSet(prefix=prefix, suffix=suffix)
    try:
        if dotenv_path:
            # Process environment comes last so it wins over the .env file.
            environment = dotenv_lines(dotenv_path) + environment
        cs.load(LocalFileReader(), dir_path, environment)
    except (ConfigSetError, FileNotFoundError) as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        ctx.exit(1)

    ctx.obj = {"cs": cs}


@cli.command()
@click.option("--indent", default="  ", show_default=True,
              help="Indentation per level; empty with --line-prefix empty prints compact JSON")
@click.option("--line-prefix", default="", help="Text prepended to every line after the first")
@click.pass_context
def dump(ctx, indent, line_prefix):
    """Print the whole merged document as JSON."""
    data = ctx.obj["cs"].dump(line_prefix, indent).decode("utf-8")
    click.echo(data, nl=not data.endswith("\n"))


@cli.command()
@click.argument("path")
@click.pass_context
def get(ctx, path):
    """Print the value at PATH (dot-notation) as JSON."""
    try:
        value = ctx.obj["cs"].read_value(path)
    except ValueNotFound:
        click.secho(f"Key not found: {path}", fg="yellow", err=True)
        ctx.exit(1)
    click.echo(json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False))


@cli.command()
@click.argument("path")
@click.pass_context
def exists(ctx, path):
    """Exit 0 if PATH exists in the document, 1 otherwise."""
    try:
        ctx.obj["cs"].read_value(path)
    except ValueNotFound:
        click.echo("false")
        ctx.exit(1)
    click.echo("true")
