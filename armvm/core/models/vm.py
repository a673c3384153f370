"""
VM configuration model — every value the templates substitute.

Loaded from armvm.yml (optional) and CLI overrides. The defaults
reproduce the stock Ubuntu 22.04 ARM64 / Parallels setup.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_NAME = "ubuntu-arm64"
DEFAULT_BOX = "luminositylabsllc/bento-ubuntu-22.04-arm64"
DEFAULT_BOX_VERSION = "20250301.01"

PROVIDER = "parallels"
PROVIDER_PLUGIN = "vagrant-parallels"

# name becomes a packer source label: source.null.<name>
_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")
_DIR_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class VMConfig(BaseModel):
    """Parameters for the generated Packer template and Vagrant files."""

    name: str = DEFAULT_NAME
    project_dir: str = ""           # empty → "<name>-project"
    output_dir: str = "output"

    box: str = DEFAULT_BOX
    box_version: str = DEFAULT_BOX_VERSION
    ubuntu_release: str = "22.04"

    memory: int = Field(default=2048, gt=0)     # MiB
    cpus: int = Field(default=2, gt=0)
    faster_vm: bool = True

    vagrant_plugin_version: str = ">= 1.0.0"

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _NAME_RE.match(value):
            raise ValueError(
                f"invalid name {value!r}: start with a letter or '_', then use "
                "letters, digits, '_' or '-'"
            )
        return value

    @field_validator("output_dir")
    @classmethod
    def _check_dir(cls, value: str) -> str:
        if not _DIR_RE.match(value):
            raise ValueError(
                f"invalid output_dir {value!r}: use letters, digits, '.', '_' or '-'"
            )
        return value

    @field_validator("box", "box_version", "ubuntu_release")
    @classmethod
    def _check_not_blank(cls, value: str) -> str:
        if not value.strip() or any(c.isspace() for c in value):
            raise ValueError(f"must be a non-empty token without whitespace: {value!r}")
        return value

    @model_validator(mode="after")
    def _default_project_dir(self) -> VMConfig:
        if not self.project_dir:
            self.project_dir = f"{self.name}-project"
        return self

    @property
    def template_file(self) -> str:
        """Packer template filename, e.g. ``ubuntu-arm64.pkr.hcl``."""
        return f"{self.name}.pkr.hcl"

    @property
    def source_ref(self) -> str:
        """Packer source reference used by the build block."""
        return f"source.null.{self.name}"

    @property
    def vm_dir(self) -> str:
        """Directory holding the Vagrantfile, relative to the base dir."""
        return f"{self.project_dir}/{self.output_dir}"
