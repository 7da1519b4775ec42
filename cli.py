import typer

from typer import Option

app = typer.Typer(help="Inspect and materialize declared content types")


def _registry(packages: list[str] | None):
    from core.settings import settings
    from services.content_type_loader_service import ContentTypeLoader
    from services.content_type_registry import ContentTypeRegistry

    registry = ContentTypeRegistry()
    ContentTypeLoader(packages or settings.content_type_packages).load_into(registry)
    return registry


@app.command("list-content-types")
def list_content_types(
    package: list[str] = Option(None, "--package", "-p", help="Content type package to scan"),
):
    """List discovered content types with their tables and fields"""
    registry = _registry(package)
    for schema in registry.all():
        typer.echo(f"{schema.slug} ({schema.kind}) -> {schema.table_name}: {schema.display_name}")
        for definition in schema.fields:
            flags = " required" if definition.required else ""
            typer.echo(f"    {definition.name}: {definition.type}{flags}")


@app.command("list-field-types")
def list_field_types():
    """List the field type tags the engine knows"""
    from services.field_type_registry import get_field_type_registry

    field_types = get_field_type_registry()
    for tag in field_types.type_tags():
        typer.echo(f"{tag}: {field_types.get_factory(tag).__name__}")


@app.command()
def materialize(
    package: list[str] = Option(None, "--package", "-p", help="Content type package to scan"),
):
    """Create missing tables and columns for every declared content type"""
    from core.settings import settings
    from db.session import engine
    from services.bootstrap_service import bootstrap

    content_engine = bootstrap(engine, settings=settings, packages=package or None)

    for result in content_engine.materialized:
        if result.created:
            typer.echo(f"created   {result.table_name}")
        elif result.added_columns:
            typer.echo(f"altered   {result.table_name} (+{', '.join(result.added_columns)})")
        else:
            typer.echo(f"unchanged {result.table_name}")

    for slug, error in content_engine.failures.items():
        typer.echo(f"failed    {slug}: {error}", err=True)

    if content_engine.failures:
        raise typer.Exit(code=1)


@app.command()
def routes(
    package: list[str] = Option(None, "--package", "-p", help="Content type package to scan"),
):
    """Print the archive and single routes declared by content types"""
    from services.route_manager import RouteManager

    for entry in RouteManager.routes(_registry(package)):
        typer.echo(f"{entry.name:<30} GET {entry.path}")


if __name__ == "__main__":
    app()
