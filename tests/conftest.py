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
Pytest configuration and fixtures for fitcheck tests.
"""

import pytest
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from fitcheck.models import OracleVerdict


SAMPLE_ITS = """\
/dts-v1/;

/ {
	description = "QCS6490 FIT image";
	#address-cells = <1>;

	images {
		kernel-1 {
			description = "Linux kernel";
			data = /incbin/("Image");
			type = "kernel";
			hash-1 {
				algo = "sha256";
			};
		};
		fdt-qcs6490-rb3gen2 {
			description = "rb3gen2 device tree";
			data = /incbin/("qcs6490-rb3gen2.dtb");
			type = "flat_dt";
		};
		fdt-qcs6490-rb3gen2-camx {
			description = "camera overlay";
			data = /incbin/("qcs6490-rb3gen2-camx.dtbo");
			type = "flat_dt";
		};
	};

	configurations {
		default = "conf-1";

		conf-1 {
			compatible = "qcom,qcs6490-rb3gen2";
			fdt = "fdt-qcs6490-rb3gen2";
		};

		conf-2 {
			compatible = "qcom,qcs6490-rb3gen2-camx";
			fdt = "fdt-qcs6490-rb3gen2", "fdt-qcs6490-rb3gen2-camx";
		};

		conf-3 {
			compatible = "qcom,qcs6490-rb3gen2-el2kvm";
			fdt = "fdt-qcs6490-rb3gen2";
		};
	};
};
"""

SAMPLE_META = """\
/dts-v1/;

/ {
	description = "QCS6490 metadata";

	soc: qcs6490 {
		msm-id = <497 0x10000>;
	};

	boards {
		rb3gen2 {
			board-id = <0x1f 0>;
		};
	};
};
"""


def make_its(configurations: str, images: str = "fdt-a {\n};") -> str:
    """Build a minimal image-tree source from image and configuration bodies."""
    return (
        "/ {\n"
        "\timages {\n"
        f"{images}\n"
        "\t};\n"
        "\tconfigurations {\n"
        f"{configurations}\n"
        "\t};\n"
        "};\n"
    )


def make_meta(*nodes: str) -> str:
    """Build a metadata source defining the given top-level nodes."""
    body = "".join(f"\t{node} {{\n\t}};\n" for node in nodes)
    return f"/dts-v1/;\n\n/ {{\n{body}}};\n"


@pytest.fixture
def sample_its():
    return SAMPLE_ITS


@pytest.fixture
def sample_meta():
    return SAMPLE_META


@pytest.fixture
def write_inputs(tmp_path):
    """Write an ITS/metadata pair into tmp_path and return their paths."""
    def _write(its: str = SAMPLE_ITS, meta: str = SAMPLE_META):
        its_path = tmp_path / "qcom-fitimage.its"
        meta_path = tmp_path / "qcom-metadata.dts"
        its_path.write_text(its, encoding="utf-8")
        meta_path.write_text(meta, encoding="utf-8")
        return str(its_path), str(meta_path)
    return _write


@pytest.fixture
def passing_oracle():
    """Oracle stub accepting any metadata."""
    calls = []

    def oracle(content):
        calls.append(content)
        return OracleVerdict(True)

    oracle.calls = calls
    return oracle


@pytest.fixture
def failing_oracle():
    """Oracle stub rejecting any metadata."""
    def oracle(content):
        return OracleVerdict(False, "metadata.dts:3.1-2 syntax error")
    return oracle


class EchoRecorder:
    """Stand-in for click.echo that records stdout and stderr lines."""

    def __init__(self):
        self.out = []
        self.err = []

    def __call__(self, message="", err=False):
        (self.err if err else self.out).append(message)


@pytest.fixture
def echo():
    return EchoRecorder()
