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
Tests for finding output and exit status mapping.
"""

import json

import pytest
import yaml
from fitcheck.fit.extractor import extract_summary
from fitcheck.fit.reporter import ReportEmitter, format_finding, format_summary
from fitcheck.exceptions import InputFileNotFoundError
from fitcheck.models import Finding, FindingCategory

METADATA_FINDING = Finding(FindingCategory.METADATA, "conf-a", "missing metadata node 'idp'")
LINK_FINDING = Finding(FindingCategory.FDT_LINK, "conf-c", "fdt entry 'x' does not match any image node")


class TestFormatFinding:
    """Test single-line finding format."""

    def test_category_tagged(self):
        assert format_finding(METADATA_FINDING) == (
            "fail METADATA conf-a: missing metadata node 'idp'"
        )

    def test_hyphenated_category(self):
        assert format_finding(LINK_FINDING).startswith("fail FDT-LINK conf-c: ")

    def test_without_configuration(self):
        finding = Finding(FindingCategory.SYNTAX, None, "broken")
        assert format_finding(finding) == "fail SYNTAX -: broken"


class TestReportEmitter:
    """Test the text and document report modes."""

    def test_success(self, echo):
        reporter = ReportEmitter(echo=echo)

        assert reporter.finish() == 0
        assert echo.out == ["success"]

    def test_findings_streamed(self, echo):
        """Test each finding is printed when emitted, before the summary."""
        reporter = ReportEmitter(echo=echo)
        reporter.emit(METADATA_FINDING)
        assert echo.out == [format_finding(METADATA_FINDING)]

        reporter.emit(LINK_FINDING)
        assert reporter.finish() == 2
        assert echo.out[-1] == "failed: 2 finding(s)"
        assert len(echo.out) == 3

    def test_fatal(self, echo):
        reporter = ReportEmitter(echo=echo)
        code = reporter.fatal(InputFileNotFoundError("missing.its"))

        assert code == 1
        assert echo.out == []
        assert echo.err == ["fail SYNTAX -: FILE_NOT_FOUND missing.its"]

    def test_json_report(self, echo):
        reporter = ReportEmitter('json', echo=echo)
        reporter.emit(METADATA_FINDING)

        assert echo.out == []
        assert reporter.finish() == 2

        data = json.loads(echo.out[0])
        assert data["status"] == "failed"
        assert data["count"] == 1
        assert data["findings"][0] == {
            "category": "METADATA",
            "configuration": "conf-a",
            "detail": "missing metadata node 'idp'",
        }

    def test_yaml_report(self, echo):
        reporter = ReportEmitter('yaml', echo=echo)

        assert reporter.finish() == 0
        data = yaml.safe_load(echo.out[0])
        assert data == {"status": "success", "count": 0, "findings": []}

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            ReportEmitter('xml')


class TestFormatSummary:
    """Test the extraction summary rendering."""

    def test_text(self, sample_its, sample_meta):
        text = format_summary(extract_summary(sample_its, sample_meta))

        assert "Images (4):" in text
        assert "Configurations (3):" in text
        assert "    fdt: fdt-qcs6490-rb3gen2, fdt-qcs6490-rb3gen2-camx" in text
        assert "Metadata nodes (4):" in text

    def test_text_without_metadata(self, sample_its):
        text = format_summary(extract_summary(sample_its))
        assert "Metadata nodes" not in text

    def test_json(self, sample_its):
        data = json.loads(format_summary(extract_summary(sample_its), 'json'))
        assert [c["name"] for c in data["configurations"]] == ["conf-1", "conf-2", "conf-3"]

    def test_yaml(self, sample_its):
        data = yaml.safe_load(format_summary(extract_summary(sample_its), 'yaml'))
        assert data["configurations"][0]["compatible"] == "qcom,qcs6490-rb3gen2"
