import json

import click

from docdb.models.enums import SerializationMethod


def _settings(ctx: click.Context):
    from docdb.settings import DocDbSettings

    overrides = {key: value for key, value in ctx.obj.items() if value is not None}
    return DocDbSettings(**overrides)


def _parse_value(raw: str):
    """Interpret VALUE as JSON, falling back to the literal string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@click.group()
@click.option("--path", default=None, help="Store file (default: from DOCDB_PATH or docdb.db).")
@click.option(
    "--format",
    "serialization",
    default=None,
    type=click.Choice([m.value for m in SerializationMethod]),
    help="Serialization method (default: from DOCDB_SERIALIZATION or json).",
)
@click.option(
    "--policy",
    "dump_policy",
    default=None,
    type=click.Choice(["never", "auto", "request", "periodic"]),
    help="Dump policy for mutating commands (default: from DOCDB_DUMP_POLICY or auto).",
)
@click.pass_context
def main(ctx: click.Context, path: str | None, serialization: str | None, dump_policy: str | None) -> None:
    """docdb - embeddable file-backed document store."""
    from docdb.log import setup_logging

    ctx.obj = {"path": path, "serialization": serialization, "dump_policy": dump_policy}
    setup_logging(_settings(ctx).log_level)


@main.command()
@click.argument("key")
@click.pass_context
def get(ctx: click.Context, key: str) -> None:
    """Print the value stored under KEY as JSON."""
    from pydantic_core import to_json

    from docdb.errors import DocError
    from docdb.store import DocDb

    settings = _settings(ctx)
    try:
        db = DocDb.load_read_only(settings.path, settings.serialization)
    except DocError as e:
        raise click.ClickException(str(e)) from e
    if not db.exists(key):
        raise click.ClickException(f"Key not found: {key}")
    click.echo(to_json(db.get(key), indent=2).decode("utf-8"))


@main.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_(ctx: click.Context, key: str, value: str) -> None:
    """Store VALUE (parsed as JSON when possible) under KEY."""
    from docdb.errors import DocError

    settings = _settings(ctx)
    try:
        with settings.open_db() as db:
            db.set(key, _parse_value(value))
    except DocError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Set {key}.")


@main.command()
@click.argument("key")
@click.pass_context
def rm(ctx: click.Context, key: str) -> None:
    """Remove KEY."""
    from docdb.errors import DocError

    settings = _settings(ctx)
    try:
        with settings.open_db() as db:
            removed = db.remove(key)
    except DocError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Removed {key}." if removed else f"Key not found: {key}")


@main.command()
@click.pass_context
def keys(ctx: click.Context) -> None:
    """List all keys, sorted."""
    from docdb.errors import DocError
    from docdb.store import DocDb

    settings = _settings(ctx)
    try:
        db = DocDb.load_read_only(settings.path, settings.serialization)
    except DocError as e:
        raise click.ClickException(str(e)) from e
    for key in sorted(db.all_keys()):
        click.echo(key)


@main.command()
@click.pass_context
def dump(ctx: click.Context) -> None:
    """Force a dump of the store (creates an empty snapshot if missing)."""
    from docdb.errors import DocError

    settings = _settings(ctx)
    try:
        with settings.open_db() as db:
            db.dump()
    except DocError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Dumped {settings.path}.")


@main.command()
@click.pass_context
def demo(ctx: click.Context) -> None:
    """Walk through the basic operations against the configured store file."""
    from pydantic import BaseModel

    from docdb.models.policy import AutoDump, DumpRelyRequest
    from docdb.store import DocDb

    class Rectangle(BaseModel):
        width: int
        length: int

    settings = _settings(ctx)
    with DocDb.create(settings.path, AutoDump(), settings.serialization) as db:
        db.set("num", 100)
        db.set("float", 3.14)
        db.set("str", "string")
        db.set("vec", [1, 2, 3])
        db.set("struct", Rectangle(width=2, length=3))

        click.echo(f"the value of num is {db.get('num', int)}")
        click.echo(f"the value of float is {db.get('float', float)}")
        click.echo(f"the value of str is {db.get('str', str)}")
        click.echo(f"the value of vec is {db.get('vec', list[int])}")
        click.echo(f"the value of struct is {db.get('struct', Rectangle)!r}")

        db.set("num", "override")
        click.echo(f"num after override: {db.get('num', str)}")

        db.remove("float")
        click.echo(f"float still exists after remove: {db.exists('float')}")

        reloaded = DocDb.load(settings.path, DumpRelyRequest(), settings.serialization)
        click.echo(f"reloaded num: {reloaded.get('num', str)}")

        for item in db:
            click.echo(f"{item.key} = {item.get_value()!r}")


if __name__ == "__main__":
    main()
