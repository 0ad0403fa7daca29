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
Utility functions shared by the fitcheck commands.
"""

import logging
from pathlib import Path

from .exceptions import InputFileNotFoundError

LOG_FORMAT = '[%(levelname)s]: %(message)s'


def read_input(path: str) -> str:
    """
    Read an input file as UTF-8 text.

    Args:
        path: Path to the file

    Returns:
        File contents

    Raises:
        InputFileNotFoundError: If the path is not an existing file
    """
    input_path = Path(path)
    if not input_path.is_file():
        raise InputFileNotFoundError(path)

    with open(input_path, "r", encoding="utf-8") as f:
        return f.read()


def configure_logging(verbose: int = 0, debug: bool = False) -> None:
    """
    Point the fitcheck loggers at stderr with the requested level.

    WARNING by default, INFO with one -v, DEBUG with two or with --debug.
    Safe to call more than once; the previous handler is replaced.
    """
    if debug or verbose > 1:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger("fitcheck")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
