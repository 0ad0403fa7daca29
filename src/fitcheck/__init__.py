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
fitcheck: FIT image tree and metadata consistency checker

Validates that every configuration of a flattened image tree source (ITS)
references existing image nodes, and that its compatible string only names
nodes defined in a companion metadata device tree source.
"""

__version__ = "0.1.0"

from .models import (
    ConfigurationRecord,
    Finding,
    FindingCategory,
    ImageTreeSummary,
    OracleVerdict,
    ValidationResult,
)
from .exceptions import (
    FitcheckError,
    ParseError,
    TokenizeError,
    FatalError,
    InputFileNotFoundError,
    InvalidMetadataSyntaxError,
    InvalidImageTreeSyntaxError,
    DtcNotFoundError,
    NoConfigurationsError,
)

__all__ = [
    # Models
    'ConfigurationRecord',
    'Finding',
    'FindingCategory',
    'ImageTreeSummary',
    'OracleVerdict',
    'ValidationResult',
    # Exceptions
    'FitcheckError',
    'ParseError',
    'TokenizeError',
    'FatalError',
    'InputFileNotFoundError',
    'InvalidMetadataSyntaxError',
    'InvalidImageTreeSyntaxError',
    'DtcNotFoundError',
    'NoConfigurationsError',
]
