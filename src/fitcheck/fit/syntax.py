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
Fail-fast syntax gate for the metadata and image-tree files.

The metadata file is checked by an oracle, normally the device tree
compiler. The image-tree file is checked by a minimal structural scan.
"""

import logging
import re
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Optional, Sequence

import libfdt

from ..exceptions import (
    DtcNotFoundError, InvalidImageTreeSyntaxError, InvalidMetadataSyntaxError,
    ParseError
)
from ..models import OracleVerdict
from .parser import tokenize, walk_nodes

logger = logging.getLogger(__name__)

Oracle = Callable[[str], OracleVerdict]

# First token, after an optional label, names a configuration node
CONFIG_NODE_RE = re.compile(r'^\s*(?:[A-Za-z_][\w-]*:\s*)?conf(?:ig)?[-@_][^\s{;=]*')
CONFIGURATIONS_RE = re.compile(r'^\s*(?:[A-Za-z_][\w-]*:\s*)?configurations\s*(?:\{.*)?$')
NODE_LINE_RE = re.compile(r'^\s*(?:[A-Za-z_][\w-]*:\s*)?[\w,.+@-]+\s*(?:\{.*)?$')
CONFIG_PROPERTY_RE = re.compile(r'^\s*(?:compatible|fdt)\s*=')
TRAILING_COMMENT_RE = re.compile(r'\s*//[^"]*$')
STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"')
NODE_CLOSE = "};"
MAX_BLOCK_DEPTH = 1


def _brace_delta(line: str) -> int:
    """Net change in brace depth over a line, ignoring quoted strings."""
    bare = STRING_RE.sub('""', line)
    return bare.count('{') - bare.count('}')


def run_dtc(content: str, dtc: str = "dtc", include_dirs: Sequence[str] = (),
            source_name: Optional[str] = None) -> OracleVerdict:
    """
    Compile DTS content with dtc and sanity check the resulting blob.

    Args:
        content: DTS source text
        dtc: dtc executable name or path
        include_dirs: Extra directories searched for /include/ files
        source_name: Name reported for the source in dtc's messages,
            instead of the temporary copy dtc actually compiles

    Returns:
        OracleVerdict with dtc's stderr as the diagnostic

    Raises:
        DtcNotFoundError: If the dtc executable cannot be run
    """
    with tempfile.TemporaryDirectory(prefix="fitcheck-") as tmpdir:
        source = Path(tmpdir) / "metadata.dts"
        blob = Path(tmpdir) / "metadata.dtb"
        source.write_text(content, encoding="utf-8")

        cmd = [dtc, "-I", "dts", "-O", "dtb", "-o", str(blob)]
        for include_dir in include_dirs:
            cmd.extend(["-i", str(include_dir)])
        cmd.append(str(source))

        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            raise DtcNotFoundError(dtc, "device tree compiler not found. "
                                        "Install with: apt install device-tree-compiler")

        diagnostic = result.stderr.strip()
        if source_name:
            diagnostic = diagnostic.replace(str(source), source_name)
        if result.returncode != 0:
            return OracleVerdict(False, diagnostic or f"dtc exited with status {result.returncode}")

        try:
            fdt = libfdt.Fdt(blob.read_bytes())
            fdt.path_offset('/')
        except libfdt.FdtException as e:
            return OracleVerdict(False, f"FDT error: {e}")

        if diagnostic:
            logger.info("dtc: %s", diagnostic)
        return OracleVerdict(True, diagnostic)


def make_dtc_oracle(dtc: str = "dtc", include_dirs: Sequence[str] = (),
                    source_name: Optional[str] = None) -> Oracle:
    """Get an oracle backed by the dtc executable."""
    def oracle(content: str) -> OracleVerdict:
        return run_dtc(content, dtc=dtc, include_dirs=include_dirs,
                       source_name=source_name)
    return oracle


class SyntaxValidator:
    """
    Fail-fast syntax gate.

    Every check raises on its first error; nothing is aggregated.
    Without an oracle the metadata check is skipped.
    """

    def __init__(self, oracle: Optional[Oracle] = None):
        self.oracle = oracle

    def validate(self, its_path: str, its_content: str,
                 meta_path: str, meta_content: str) -> None:
        """Check the metadata file first, then the image-tree file."""
        self.validate_metadata(meta_path, meta_content)
        self.validate_image_tree(its_path, its_content)

    def validate_metadata(self, path: str, content: str) -> None:
        if self.oracle is None:
            logger.info("Skipping metadata syntax check for %s", path)
            return

        verdict = self.oracle(content)
        if not verdict.ok:
            raise InvalidMetadataSyntaxError(path, verdict.diagnostic)
        logger.debug("Metadata syntax OK: %s", path)

    def validate_image_tree(self, path: str, content: str) -> None:
        self._scan_lines(path, content)
        self._check_balance(path, content)
        logger.debug("Image-tree syntax OK: %s", path)

    def _scan_lines(self, path: str, content: str) -> None:
        """
        Line scan for configuration nodes.

        A configuration node is any node line directly inside the
        ``configurations`` block, or any line carrying the ``conf-`` /
        ``config-`` marker. Brace depth is tracked per line to know which
        lines sit directly inside the block.
        """
        depth = 0
        block_depth: Optional[int] = None
        awaiting_block = False
        inside_config = False

        for lineno, raw in enumerate(content.splitlines(), 1):
            line = TRAILING_COMMENT_RE.sub('', raw).rstrip()
            stripped = line.strip()
            line_depth = depth
            depth += _brace_delta(line)

            if block_depth is not None and depth < block_depth:
                block_depth = None

            if (block_depth is None and line_depth <= MAX_BLOCK_DEPTH
                    and CONFIGURATIONS_RE.match(line)):
                if '{' in line:
                    block_depth = line_depth + 1
                else:
                    awaiting_block = True
                continue

            if awaiting_block and '{' in line:
                block_depth = line_depth + 1
                awaiting_block = False
                continue

            if stripped == NODE_CLOSE:
                inside_config = False
                continue

            in_block = (block_depth is not None and line_depth == block_depth
                        and NODE_LINE_RE.match(line) is not None)
            if (in_block or CONFIG_NODE_RE.match(line)) and '=' not in line:
                if '{' not in line:
                    raise InvalidImageTreeSyntaxError(
                        path, f"line {lineno}: missing opening brace: {stripped}")
                inside_config = True
                continue

            if inside_config and CONFIG_PROPERTY_RE.match(line) and not line.endswith(';'):
                raise InvalidImageTreeSyntaxError(
                    path, f"line {lineno}: missing trailing semicolon: {stripped}")

    def _check_balance(self, path: str, content: str) -> None:
        try:
            for _ in walk_nodes(tokenize(content)):
                pass
        except ParseError as e:
            raise InvalidImageTreeSyntaxError(path, str(e)) from e
