import json
from pathlib import Path

import click

from .logging import configure_logging, get_logger
from .pipeline import CodeGenerationError, CodeGeneratorConfig, PipelineGenerator

logger = get_logger("cli")


@click.command()
@click.option("--name", "-n", default=None, type=str, help="Name of the root type (defaults to the file name)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--no-root", is_flag=True, default=False, help="Only generate the schema definitions")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log the generation steps")
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False, resolve_path=True),
    help="Also write the log to this file",
)
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def json_schema_to_swift(name, config, no_root, verbose, log_file, path, output):
    configure_logging(verbose=verbose, log_file=Path(log_file) if log_file else None)

    with open(path) as f:
        schema = json.load(f)

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    if name is None:
        name = Path(path).stem.split(".")[0]

    codegen = PipelineGenerator(name, schema, config, root=not no_root)
    try:
        out = codegen.generate()
    except CodeGenerationError as e:
        raise click.ClickException(str(e)) from e

    logger.debug("Writing %s", output)
    with open(output, "w") as f:
        f.write(out)
