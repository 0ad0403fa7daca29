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
Data models for image-tree and metadata cross-reference validation.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple
from enum import Enum


ImageNodeSet = FrozenSet[str]
MetadataNodeSet = FrozenSet[str]


class FindingCategory(Enum):
    """Categories of validation findings."""
    METADATA = "METADATA"
    FDT_PROP = "FDT-PROP"
    FDT_NAME = "FDT-NAME"
    FDT_LINK = "FDT-LINK"
    SYNTAX = "SYNTAX"


@dataclass(frozen=True)
class ConfigurationRecord:
    """One configuration subnode of the image-tree file."""
    name: str
    compatible: Optional[str] = None
    fdt_refs: Tuple[str, ...] = ()
    line: int = 0  # Line of the node opening


@dataclass(frozen=True)
class Finding:
    """A single validation finding."""
    category: FindingCategory
    configuration: Optional[str]
    detail: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "configuration": self.configuration,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class OracleVerdict:
    """Pass/fail answer of the metadata syntax oracle."""
    ok: bool
    diagnostic: str = ""


@dataclass(frozen=True)
class ValidationResult:
    """Result of the cross-reference validation."""
    findings: Tuple[Finding, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.findings

    @property
    def exit_code(self) -> int:
        """0 when no findings were produced, 2 otherwise."""
        return 0 if self.is_valid else 2

    def by_category(self, category: FindingCategory) -> List[Finding]:
        """Get findings of one category, in discovery order."""
        return [f for f in self.findings if f.category == category]


@dataclass(frozen=True)
class ImageTreeSummary:
    """Everything extracted from an image-tree / metadata pair."""
    images: ImageNodeSet
    configurations: Tuple[ConfigurationRecord, ...]
    metadata_nodes: MetadataNodeSet = field(default_factory=frozenset)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "images": sorted(self.images),
            "configurations": [
                {
                    "name": record.name,
                    "compatible": record.compatible,
                    "fdt": list(record.fdt_refs),
                }
                for record in self.configurations
            ],
            "metadata_nodes": sorted(self.metadata_nodes),
        }
