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
Exception classes for fitcheck parsing and fatal validation errors.
"""

from typing import Optional

from .models import Finding, FindingCategory


class FitcheckError(Exception):
    """Base exception for all fitcheck errors."""


class ParseError(FitcheckError):
    """Raised when tokenizing or walking a source file fails."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class TokenizeError(ParseError):
    """Raised on unterminated strings or comments."""


class FatalError(FitcheckError):
    """
    An error that aborts the whole run before any report is produced.

    Every fatal error carries a short machine-readable code and the path of
    the input it concerns.
    """

    code = "FATAL"

    def __init__(self, path: str, detail: str = ""):
        self.path = path
        self.detail = detail
        message = f"{self.code} {path}"
        if detail:
            message += f": {detail}"
        super().__init__(message)

    @property
    def finding(self) -> Finding:
        """The fatal error expressed as a SYNTAX finding."""
        detail = f"{self.code} {self.path}"
        if self.detail:
            detail += f": {self.detail}"
        return Finding(FindingCategory.SYNTAX, None, detail)


class InputFileNotFoundError(FatalError):
    """Raised when an input file does not exist."""

    code = "FILE_NOT_FOUND"


class InvalidMetadataSyntaxError(FatalError):
    """Raised when the syntax oracle rejects the metadata file."""

    code = "INVALID_DTS_SYNTAX"


class InvalidImageTreeSyntaxError(FatalError):
    """Raised when the image-tree file fails the structural scan."""

    code = "INVALID_ITS_SYNTAX"


class DtcNotFoundError(FatalError):
    """Raised when the device tree compiler cannot be executed."""

    code = "DTC_NOT_FOUND"


class NoConfigurationsError(FatalError):
    """Raised when the image-tree file defines no configuration nodes."""

    code = "NO_CONFIGURATIONS"
