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
Tests for fitcheck data models and fatal errors.
"""

import dataclasses

import pytest
from fitcheck.models import (
    ConfigurationRecord, Finding, FindingCategory, ValidationResult
)
from fitcheck.exceptions import (
    FatalError, InvalidImageTreeSyntaxError, InvalidMetadataSyntaxError,
    NoConfigurationsError, ParseError
)


class TestModels:
    """Test data models."""

    def test_category_values(self):
        assert [c.value for c in FindingCategory] == [
            "METADATA", "FDT-PROP", "FDT-NAME", "FDT-LINK", "SYNTAX"
        ]

    def test_records_are_immutable(self):
        record = ConfigurationRecord("conf-1", None, ("fdt-a",))
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.name = "conf-2"

    def test_findings_are_immutable(self):
        finding = Finding(FindingCategory.FDT_PROP, "conf-1", "missing fdt property")
        with pytest.raises(dataclasses.FrozenInstanceError):
            finding.detail = "changed"

    def test_empty_result_is_valid(self):
        result = ValidationResult()
        assert result.is_valid
        assert result.exit_code == 0

    def test_result_with_findings(self):
        findings = (
            Finding(FindingCategory.FDT_NAME, "conf-1", "a"),
            Finding(FindingCategory.FDT_LINK, "conf-1", "b"),
            Finding(FindingCategory.FDT_NAME, "conf-2", "c"),
        )
        result = ValidationResult(findings)

        assert not result.is_valid
        assert result.exit_code == 2
        assert [f.detail for f in result.by_category(FindingCategory.FDT_NAME)] == ["a", "c"]


class TestExceptions:
    """Test the error taxonomy."""

    def test_fatal_message(self):
        error = InvalidMetadataSyntaxError("meta.dts", "syntax error")
        assert str(error) == "INVALID_DTS_SYNTAX meta.dts: syntax error"

    def test_fatal_without_detail(self):
        assert str(NoConfigurationsError("a.its")) == "NO_CONFIGURATIONS a.its"

    def test_fatal_finding(self):
        finding = InvalidImageTreeSyntaxError("a.its", "line 3: missing opening brace").finding

        assert finding.category == FindingCategory.SYNTAX
        assert finding.configuration is None
        assert finding.detail == "INVALID_ITS_SYNTAX a.its: line 3: missing opening brace"

    def test_parse_error_line(self):
        error = ParseError("unexpected brace", line=12)
        assert error.line == 12
        assert str(error) == "line 12: unexpected brace"

    def test_parse_error_is_not_fatal(self):
        assert not issubclass(ParseError, FatalError)
