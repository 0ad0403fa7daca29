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
Image-tree parsing, extraction and cross-reference validation.

The dtc-backed syntax gate lives in fitcheck.fit.syntax.
"""

from .parser import tokenize, walk_nodes
from .extractor import ImageNodeExtractor, ConfigurationExtractor, MetadataNodeExtractor
from .validator import CrossReferenceValidator
from .reporter import ReportEmitter

__all__ = [
    'tokenize',
    'walk_nodes',
    'ImageNodeExtractor',
    'ConfigurationExtractor',
    'MetadataNodeExtractor',
    'CrossReferenceValidator',
    'ReportEmitter',
]
