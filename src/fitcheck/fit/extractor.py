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
Extraction of image nodes, configurations and metadata node names.

Each extractor is a pure function of the file contents it is given and
returns immutable flat collections; no tree is kept.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..models import (
    ConfigurationRecord, ImageNodeSet, ImageTreeSummary, MetadataNodeSet
)
from .parser import EventKind, NodeEvent, parse_events

logger = logging.getLogger(__name__)

IMAGES_NODE = "images"
CONFIGURATIONS_NODE = "configurations"
FDT_PREFIX = "fdt-"

# A top-level block sits directly in the file or directly under "/ { ... }"
MAX_BLOCK_DEPTH = 1


class Cursor(Enum):
    """Scan position relative to the block being extracted."""
    OUTSIDE = "outside"
    IN_BLOCK = "in-block"
    IN_CONFIG = "in-config"
    DONE = "done"


def _is_block_start(event: NodeEvent, block_name: str) -> bool:
    return (event.kind == EventKind.OPEN and event.name == block_name
            and event.depth <= MAX_BLOCK_DEPTH)


class ImageNodeExtractor:
    """Collects the node names defined in the ``images`` block."""

    def extract(self, its_content: str) -> ImageNodeSet:
        events = parse_events(its_content)
        images = self._extract_primary(events)
        if images:
            return images

        fallback = self._extract_fallback(events)
        if fallback:
            logger.warning("No image nodes found in an 'images' block; "
                           "using %d '%s' nodes found by name", len(fallback), FDT_PREFIX)
        return fallback

    def _extract_primary(self, events: Sequence[NodeEvent]) -> ImageNodeSet:
        cursor = Cursor.OUTSIDE
        block_depth = 0
        names = set()

        for event in events:
            if cursor == Cursor.OUTSIDE:
                if _is_block_start(event, IMAGES_NODE):
                    cursor = Cursor.IN_BLOCK
                    block_depth = event.depth
            elif cursor == Cursor.IN_BLOCK:
                if event.kind == EventKind.OPEN and event.name:
                    names.add(event.name)
                elif event.kind == EventKind.CLOSE and event.depth == block_depth:
                    cursor = Cursor.DONE
                    break

        logger.debug("Image nodes: %s", sorted(names))
        return frozenset(names)

    def _extract_fallback(self, events: Sequence[NodeEvent]) -> ImageNodeSet:
        return frozenset(
            event.name for event in events
            if event.kind == EventKind.OPEN and event.first_on_line
            and event.name.startswith(FDT_PREFIX)
        )


class ConfigurationExtractor:
    """Builds one ConfigurationRecord per child of the ``configurations`` block."""

    def extract(self, its_content: str) -> Tuple[ConfigurationRecord, ...]:
        cursor = Cursor.OUTSIDE
        block_depth = 0
        records: List[ConfigurationRecord] = []

        name = ""
        line = 0
        compatible: Optional[str] = None
        fdt_refs: List[str] = []

        for event in parse_events(its_content):
            if cursor == Cursor.OUTSIDE:
                if _is_block_start(event, CONFIGURATIONS_NODE):
                    cursor = Cursor.IN_BLOCK
                    block_depth = event.depth

            elif cursor == Cursor.IN_BLOCK:
                if event.kind == EventKind.OPEN and event.depth == block_depth + 1:
                    cursor = Cursor.IN_CONFIG
                    name, line = event.name, event.line
                    compatible, fdt_refs = None, []
                elif event.kind == EventKind.CLOSE and event.depth == block_depth:
                    cursor = Cursor.DONE
                    break

            elif cursor == Cursor.IN_CONFIG:
                if event.kind == EventKind.PROPERTY and event.depth == block_depth + 2:
                    if event.name == "compatible" and compatible is None and event.values:
                        compatible = event.values[0]
                    elif event.name == "fdt":
                        fdt_refs.extend(event.values)
                elif event.kind == EventKind.CLOSE and event.depth == block_depth + 1:
                    if name:
                        records.append(ConfigurationRecord(
                            name=name,
                            compatible=compatible,
                            fdt_refs=tuple(fdt_refs),
                            line=line,
                        ))
                    else:
                        logger.debug("Dropping unnamed configuration at line %d", line)
                    cursor = Cursor.IN_BLOCK

        logger.debug("Configurations: %s", [record.name for record in records])
        return tuple(records)


class MetadataNodeExtractor:
    """Collects every node name defined in the metadata file, labels excluded."""

    def extract(self, meta_content: str) -> MetadataNodeSet:
        names = {
            event.name for event in parse_events(meta_content)
            if event.kind == EventKind.OPEN and not event.is_reference and event.name
        }
        logger.debug("Metadata nodes: %d", len(names))
        return frozenset(names)


def extract_summary(its_content: str, meta_content: Optional[str] = None) -> ImageTreeSummary:
    """Run all three extractors, in pipeline order."""
    images = ImageNodeExtractor().extract(its_content)
    configurations = ConfigurationExtractor().extract(its_content)
    metadata_nodes = frozenset()
    if meta_content is not None:
        metadata_nodes = MetadataNodeExtractor().extract(meta_content)

    return ImageTreeSummary(
        images=images,
        configurations=configurations,
        metadata_nodes=metadata_nodes,
    )
