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
Cross-reference validation between configurations, images and metadata.
"""

import logging
from typing import FrozenSet, Iterable, Iterator, List

from ..models import (
    ConfigurationRecord, Finding, FindingCategory, ImageNodeSet,
    MetadataNodeSet, ValidationResult
)
from .extractor import FDT_PREFIX

logger = logging.getLogger(__name__)

COMPATIBLE_VENDOR_PREFIX = "qcom,"

# Tokens allowed to be absent from the metadata file
EXEMPT_TOKENS: FrozenSet[str] = frozenset({"camx", "el2kvm"})


def compatible_tokens(compatible: str) -> List[str]:
    """
    Split a compatible string into the tokens looked up in the metadata.

    The vendor prefix is removed and the rest is split on ``-``, dropping
    empty tokens: ``"qcom,qcs6490-rb3gen2--vision"`` gives
    ``["qcs6490", "rb3gen2", "vision"]``.
    """
    if compatible.startswith(COMPATIBLE_VENDOR_PREFIX):
        compatible = compatible[len(COMPATIBLE_VENDOR_PREFIX):]
    return [token for token in compatible.split('-') if token]


class CrossReferenceValidator:
    """Checks every configuration against the image and metadata node sets."""

    def __init__(self, exempt_tokens: Iterable[str] = EXEMPT_TOKENS):
        self.exempt_tokens = frozenset(exempt_tokens)

    def validate(self, configurations: Iterable[ConfigurationRecord],
                 images: ImageNodeSet,
                 metadata_nodes: MetadataNodeSet) -> ValidationResult:
        """Run all checks and collect the findings."""
        return ValidationResult(findings=tuple(
            self.iter_findings(configurations, images, metadata_nodes)
        ))

    def iter_findings(self, configurations: Iterable[ConfigurationRecord],
                      images: ImageNodeSet,
                      metadata_nodes: MetadataNodeSet) -> Iterator[Finding]:
        """Yield findings in discovery order, configuration by configuration."""
        for record in configurations:
            yield from self._check_metadata(record, metadata_nodes)
            yield from self._check_fdt(record, images)

    def _check_metadata(self, record: ConfigurationRecord,
                        metadata_nodes: MetadataNodeSet) -> Iterator[Finding]:
        if record.compatible is None:
            logger.debug("%s: no compatible property, skipping metadata check", record.name)
            return

        for token in compatible_tokens(record.compatible):
            if token in metadata_nodes:
                continue
            if token in self.exempt_tokens:
                logger.debug("%s: token '%s' is exempt", record.name, token)
                continue
            yield Finding(
                FindingCategory.METADATA,
                record.name,
                f"missing metadata node '{token}'",
            )

    def _check_fdt(self, record: ConfigurationRecord,
                   images: ImageNodeSet) -> Iterator[Finding]:
        if not record.fdt_refs:
            yield Finding(FindingCategory.FDT_PROP, record.name, "missing fdt property")
            return

        for ref in record.fdt_refs:
            if not ref.startswith(FDT_PREFIX):
                yield Finding(
                    FindingCategory.FDT_NAME,
                    record.name,
                    f"fdt entry '{ref}' does not start with '{FDT_PREFIX}'",
                )
            if ref not in images:
                yield Finding(
                    FindingCategory.FDT_LINK,
                    record.name,
                    f"fdt entry '{ref}' does not match any image node",
                )
