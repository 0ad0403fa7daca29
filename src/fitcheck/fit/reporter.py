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
Finding output and exit status mapping.
"""

import json
from typing import Any, Callable, Dict, List

import click
import yaml

from ..exceptions import FatalError
from ..models import Finding, ImageTreeSummary, ValidationResult

SUCCESS_MARKER = "success"
FATAL_EXIT_CODE = 1

REPORT_FORMATS = ('text', 'json', 'yaml')


def format_finding(finding: Finding) -> str:
    """Format a finding as a single category-tagged line."""
    configuration = finding.configuration or "-"
    return f"fail {finding.category.value} {configuration}: {finding.detail}"


def format_failure_marker(count: int) -> str:
    return f"failed: {count} finding(s)"


class ReportEmitter:
    """
    Prints findings and maps the outcome to an exit status.

    In text format each finding is printed as soon as it is emitted. The
    json and yaml formats print one document when the run finishes.
    """

    def __init__(self, format: str = 'text', echo: Callable[..., Any] = click.echo):
        if format not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format: {format}")
        self.format = format
        self.echo = echo
        self.findings: List[Finding] = []

    def emit(self, finding: Finding) -> None:
        self.findings.append(finding)
        if self.format == 'text':
            self.echo(format_finding(finding))

    def finish(self) -> int:
        """Print the final marker (or document) and return the exit code."""
        result = ValidationResult(findings=tuple(self.findings))

        if self.format == 'text':
            if result.is_valid:
                self.echo(SUCCESS_MARKER)
            else:
                self.echo(format_failure_marker(len(result.findings)))
        else:
            self.echo(self.generate_report(result))

        return result.exit_code

    def fatal(self, error: FatalError) -> int:
        """Report a fatal error as a SYNTAX finding on stderr, with no partial report."""
        self.echo(format_finding(error.finding), err=True)
        return FATAL_EXIT_CODE

    def generate_report(self, result: ValidationResult) -> str:
        """Generate a json or yaml report document."""
        data = self.generate_json_report(result)
        if self.format == 'yaml':
            return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        return json.dumps(data, indent=2)

    def generate_json_report(self, result: ValidationResult) -> Dict[str, Any]:
        return {
            "status": SUCCESS_MARKER if result.is_valid else "failed",
            "count": len(result.findings),
            "findings": [finding.to_dict() for finding in result.findings],
        }


def format_summary(summary: ImageTreeSummary, format: str = 'text') -> str:
    """Render extracted images, configurations and metadata nodes."""
    if format == 'json':
        return json.dumps(summary.to_dict(), indent=2)
    if format == 'yaml':
        return yaml.safe_dump(summary.to_dict(), default_flow_style=False, sort_keys=False)

    lines = []
    lines.append(f"Images ({len(summary.images)}):")
    for name in sorted(summary.images):
        lines.append(f"  {name}")

    lines.append(f"Configurations ({len(summary.configurations)}):")
    for record in summary.configurations:
        lines.append(f"  {record.name} (line {record.line})")
        lines.append(f"    compatible: {record.compatible or 'none'}")
        lines.append(f"    fdt: {', '.join(record.fdt_refs) or 'none'}")

    if summary.metadata_nodes:
        lines.append(f"Metadata nodes ({len(summary.metadata_nodes)}):")
        for name in sorted(summary.metadata_nodes):
            lines.append(f"  {name}")

    return "\n".join(lines)
