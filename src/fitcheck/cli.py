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
Command-line interface for fitcheck.
"""

import click
from .check.main import check
from .show.main import show


@click.group()
@click.version_option(version="0.1.0", prog_name="fitcheck")
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.pass_context
def main(ctx, debug):
    """fitcheck: FIT image tree and metadata consistency checker."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


# Add subcommands
main.add_command(check)
main.add_command(show)


if __name__ == "__main__":
    main()
