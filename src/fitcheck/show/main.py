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
Show what is extracted from an image-tree file and, optionally, its
metadata file. Nothing is validated.
"""

import sys
from typing import Optional

import click

from ..check.main import DEFAULT_ITS_FILE
from ..exceptions import FatalError, ParseError
from ..fit.extractor import extract_summary
from ..fit.reporter import FATAL_EXIT_CODE, REPORT_FORMATS, format_summary
from ..utils import read_input


@click.command()
@click.argument('its', required=False, default=DEFAULT_ITS_FILE)
@click.argument('meta', required=False)
@click.option('--format', type=click.Choice(REPORT_FORMATS), default='text',
              help='Output format')
@click.pass_context
def show(ctx, its: str, meta: Optional[str], format: str):
    """Show images, configurations and metadata nodes."""
    debug = bool(ctx.obj and ctx.obj.get("debug"))

    try:
        its_content = read_input(its)
        meta_content = read_input(meta) if meta else None
        summary = extract_summary(its_content, meta_content)
    except FatalError as e:
        click.echo(f"fail {e}", err=True)
        sys.exit(FATAL_EXIT_CODE)
    except ParseError as e:
        click.echo(f"Parse error: {e}", err=True)
        sys.exit(FATAL_EXIT_CODE)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        if debug:
            import traceback
            traceback.print_exc()
        sys.exit(FATAL_EXIT_CODE)

    click.echo(format_summary(summary, format))
