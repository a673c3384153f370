"""
Tests for the template generators — Packer template, Vagrantfile,
setup.sh and README.

Pure unit tests: VMConfig in → GeneratedFile out. No packer required.
"""

from pathlib import Path

import pytest

from armvm.core.models.vm import VMConfig
from armvm.core.services.generators import TEMPLATES, render, vm_files
from armvm.core.services.generators.packer_template import (
    generate_packer_template,
    hcl_quote,
)
from armvm.core.services.generators.readme import generate_readme
from armvm.core.services.generators.setup_script import generate_setup_script
from armvm.core.services.generators.vagrantfile import generate_vagrantfile


def _hcl_unquote(literal: str) -> str:
    """Inverse of hcl_quote for the escapes the generator emits."""
    assert literal.startswith('"') and literal.endswith('"'), literal
    body = literal[1:-1]
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\":
            out.append(body[i + 1])
            i += 2
            continue
        if body.startswith("$${", i) or body.startswith("%%{", i):
            out.append(body[i])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _heredocs(template: str) -> dict[str, str]:
    """Files a ``packer build`` of *template* would write, keyed by path."""
    commands = [
        _hcl_unquote(line.strip().rstrip(","))
        for line in template.splitlines()
        if line.startswith('      "')
    ]
    files: dict[str, str] = {}
    target: str | None = None
    body: list[str] = []
    for command in commands:
        if target is None:
            if command.startswith("cat > ") and command.endswith("<< 'EOT'"):
                target = command[len("cat > "):].split(" << ")[0]
                body = []
        elif command == "EOT":
            files[target] = "\n".join(body) + "\n"
            target = None
        else:
            body.append(command)
    return files


# ═══════════════════════════════════════════════════════════════════
#  Default config reproduces the stock files byte for byte
# ═══════════════════════════════════════════════════════════════════


class TestStockOutput:
    def test_packer_template(self, default_cfg: VMConfig, stock_dir: Path):
        result = generate_packer_template(default_cfg)
        assert result.path == "ubuntu-arm64.pkr.hcl"
        assert result.content == (stock_dir / "ubuntu-arm64.pkr.hcl").read_text()

    def test_vagrantfile(self, default_cfg: VMConfig, stock_dir: Path):
        result = generate_vagrantfile(default_cfg)
        assert result.path == "output/Vagrantfile"
        assert result.content == (stock_dir / "Vagrantfile").read_text()

    def test_setup_script(self, default_cfg: VMConfig, stock_dir: Path):
        result = generate_setup_script(default_cfg)
        assert result.path == "output/setup.sh"
        assert result.executable is True
        assert result.content == (stock_dir / "setup.sh").read_text()

    def test_readme(self, default_cfg: VMConfig, stock_dir: Path):
        result = generate_readme(default_cfg)
        assert result.path == "output/README.md"
        assert result.executable is False
        assert result.content == (stock_dir / "README.md").read_text()

    def test_template_keeps_trailing_whitespace_line(self, default_cfg: VMConfig):
        content = generate_packer_template(default_cfg).content
        assert '  sources = ["source.null.ubuntu-arm64"]\n  \n  # Create Vagrantfile' in content

    def test_template_ends_with_single_newline(self, default_cfg: VMConfig):
        content = generate_packer_template(default_cfg).content
        assert content.endswith("  }\n}\n")


# ═══════════════════════════════════════════════════════════════════
#  Packer template ↔ direct generation
# ═══════════════════════════════════════════════════════════════════


class TestTemplateConsistency:
    @pytest.mark.parametrize(
        "overrides",
        [
            {},
            {"memory": 4096, "cpus": 4},
            {"memory": 3000, "cpus": 1, "faster_vm": False},
            {"name": "lab", "output_dir": "vm", "box": "acme/jammy-arm64", "box_version": "1.2.3"},
        ],
    )
    def test_heredocs_match_generators(self, overrides: dict):
        cfg = VMConfig(**overrides)
        written = _heredocs(generate_packer_template(cfg).content)
        expected = {f.path: f.content for f in vm_files(cfg)}
        assert written == expected

    def test_provisioner_order_and_commands(self, default_cfg: VMConfig):
        content = generate_packer_template(default_cfg).content
        vagrant_at = content.index("# Create Vagrantfile")
        setup_at = content.index("# Create setup script")
        readme_at = content.index("# Create README file")
        assert vagrant_at < setup_at < readme_at
        assert content.count('provisioner "shell-local"') == 3
        assert '"mkdir -p output",' in content
        assert '"chmod +x output/setup.sh"' in content

    def test_custom_names_flow_through(self):
        cfg = VMConfig(name="lab", output_dir="vm")
        content = generate_packer_template(cfg).content
        assert generate_packer_template(cfg).path == "lab.pkr.hcl"
        assert 'source "null" "lab" {' in content
        assert 'sources = ["source.null.lab"]' in content
        assert '"mkdir -p vm",' in content
        assert "cat > vm/Vagrantfile << 'EOT'" in content


# ═══════════════════════════════════════════════════════════════════
#  Parameter substitution
# ═══════════════════════════════════════════════════════════════════


class TestSubstitution:
    def test_vagrantfile_resources(self):
        content = generate_vagrantfile(VMConfig(memory=8192, cpus=6)).content
        assert "    prl.memory = 8192\n" in content
        assert "    prl.cpus = 6\n" in content

    def test_vagrantfile_without_faster_vm(self):
        content = generate_vagrantfile(VMConfig(faster_vm=False)).content
        assert "--faster-vm" not in content
        assert "    prl.cpus = 2\n  end\n" in content

    def test_setup_script_uses_box(self):
        content = generate_setup_script(VMConfig(box="acme/box")).content
        assert "grep -q acme/box; then" in content
        assert "vagrant box add acme/box --provider parallels" in content

    def test_readme_memory_in_gb(self):
        assert "- 4GB RAM\n" in generate_readme(VMConfig(memory=4096)).content

    def test_readme_memory_in_mb(self):
        assert "- 3000MB RAM\n" in generate_readme(VMConfig(memory=3000)).content

    def test_readme_single_cpu(self):
        assert "- 1 CPU core\n" in generate_readme(VMConfig(cpus=1)).content

    def test_readme_release(self):
        content = generate_readme(VMConfig(ubuntu_release="24.04")).content
        assert "an Ubuntu 24.04 ARM64 virtual machine" in content
        assert "- Ubuntu 24.04 LTS (ARM64)" in content


# ═══════════════════════════════════════════════════════════════════
#  hcl_quote / render
# ═══════════════════════════════════════════════════════════════════


class TestHclQuote:
    def test_plain(self):
        assert hcl_quote("mkdir -p output") == '"mkdir -p output"'

    def test_quotes_and_backslashes(self):
        assert hcl_quote('echo "\\033[0m"') == '"echo \\"\\\\033[0m\\""'

    def test_template_sequences(self):
        assert hcl_quote("${HOME} %{if}") == '"$${HOME} %%{if}"'

    def test_shell_substitution_untouched(self):
        assert hcl_quote("$(hostname -I)") == '"$(hostname -I)"'


class TestRender:
    def test_all_kinds(self, default_cfg: VMConfig):
        for kind in TEMPLATES:
            assert render(kind, default_cfg).content

    def test_unknown_kind(self, default_cfg: VMConfig):
        with pytest.raises(ValueError, match="Unknown template 'kickstart'"):
            render("kickstart", default_cfg)

    def test_vm_files_order(self, default_cfg: VMConfig):
        paths = [f.path for f in vm_files(default_cfg)]
        assert paths == ["output/Vagrantfile", "output/setup.sh", "output/README.md"]
