# Copyright 2025 Multikernel Technologies, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Check subcommand: validate an image-tree file against its metadata file.

Exit status:
    0  no findings
    1  fatal error (missing input, syntax gate failure, dtc unavailable,
       no configurations)
    2  one or more cross-reference findings
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from ..exceptions import FatalError, InvalidMetadataSyntaxError, NoConfigurationsError, ParseError
from ..fit.extractor import ConfigurationExtractor, ImageNodeExtractor, MetadataNodeExtractor
from ..fit.reporter import FATAL_EXIT_CODE, REPORT_FORMATS, ReportEmitter
from ..fit.syntax import Oracle, SyntaxValidator, make_dtc_oracle
from ..fit.validator import CrossReferenceValidator
from ..utils import configure_logging, read_input

logger = logging.getLogger(__name__)

DEFAULT_ITS_FILE = "qcom-fitimage.its"
DEFAULT_META_FILE = "qcom-metadata.dts"


def run_check(its_path: str, meta_path: str, reporter: ReportEmitter,
              oracle: Optional[Oracle] = None,
              validator: Optional[CrossReferenceValidator] = None) -> int:
    """
    Run the whole pipeline and return the exit status.

    Phases run strictly in order: input check, syntax gate, image,
    configuration and metadata extraction, cross-reference validation,
    report. Fatal errors propagate as FatalError before anything is
    reported.
    """
    its_content = read_input(its_path)
    meta_content = read_input(meta_path)

    SyntaxValidator(oracle).validate(its_path, its_content, meta_path, meta_content)

    images = ImageNodeExtractor().extract(its_content)
    configurations = ConfigurationExtractor().extract(its_content)
    if not configurations:
        raise NoConfigurationsError(its_path, "no configuration nodes found")

    try:
        metadata_nodes = MetadataNodeExtractor().extract(meta_content)
    except ParseError as e:
        raise InvalidMetadataSyntaxError(meta_path, str(e)) from e

    logger.info("%d image nodes, %d configurations, %d metadata nodes",
                len(images), len(configurations), len(metadata_nodes))

    validator = validator or CrossReferenceValidator()
    for finding in validator.iter_findings(configurations, images, metadata_nodes):
        reporter.emit(finding)

    return reporter.finish()


@click.command()
@click.argument('its', required=False, default=DEFAULT_ITS_FILE)
@click.argument('meta', required=False, default=DEFAULT_META_FILE)
@click.option('--format', type=click.Choice(REPORT_FORMATS), default='text',
              help='Report format')
@click.option('--dtc', 'dtc_path', default='dtc', show_default=True,
              help='Device tree compiler used to check the metadata file')
@click.option('--include', '-I', 'include_dirs', multiple=True,
              help='Extra include directory passed to dtc (repeatable)')
@click.option('--skip-dtc', is_flag=True, help='Do not run dtc on the metadata file')
@click.option('--verbose', '-v', count=True, help='Verbose output (repeat for debug)')
@click.pass_context
def check(ctx, its: str, meta: str, format: str, dtc_path: str,
          include_dirs: tuple, skip_dtc: bool, verbose: int):
    """Check ITS configurations against a metadata DTS file.

    ITS defaults to qcom-fitimage.its and META to qcom-metadata.dts.
    """
    debug = bool(ctx.obj and ctx.obj.get("debug"))
    configure_logging(verbose, debug)

    reporter = ReportEmitter(format)
    oracle = None
    if not skip_dtc:
        oracle = make_dtc_oracle(dtc_path, [str(Path(meta).parent), *include_dirs],
                                 source_name=meta)

    try:
        exit_code = run_check(its, meta, reporter, oracle)
    except FatalError as e:
        exit_code = reporter.fatal(e)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        if debug:
            import traceback
            traceback.print_exc()
        exit_code = FATAL_EXIT_CODE

    sys.exit(exit_code)
