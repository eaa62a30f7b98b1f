import json
import sys

import click

from .errors import CodegenError
from .logging import configure_logging
from .pipeline import CodeGeneratorConfig, PipelineGenerator


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--tag", "-t", default=None, type=str, help="Comment tag that enables generation for a type")
@click.option(
    "--no-validate",
    is_flag=True,
    default=False,
    help="Skip the syntax check of the generated stubs before writing",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Increase log verbosity")
@click.argument("path", type=click.Path(exists=True, file_okay=False, resolve_path=True))
@click.argument("output", type=str)
def starlark_docs_codegen(config, tag, no_validate, verbose, path, output):
    """Generate Starlark API doc stubs for the Go package in PATH.

    OUTPUT is the directory that receives __init__.py, or - to print to stdout.

    \b
    Examples:
      starlark_docs_codegen ./pkg/apis/core/v1alpha1 ../tilt.build/api/modules/v1alpha1
      starlark_docs_codegen ./pkg/apis/core/v1alpha1 -
    """
    configure_logging(verbose=verbose)

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    if tag:
        config.tag_name = tag
    if no_validate:
        config.output.validate_before_write = False

    codegen = PipelineGenerator(path, config)
    try:
        codegen.write(output)
    except CodegenError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
