"""
README generator — usage notes for the generated VM project.
"""

from __future__ import annotations

from armvm.core.models.template import GeneratedFile
from armvm.core.models.vm import VMConfig


def _memory_label(memory_mb: int) -> str:
    if memory_mb % 1024 == 0:
        return f"{memory_mb // 1024}GB RAM"
    return f"{memory_mb}MB RAM"


def _cpu_label(cpus: int) -> str:
    return f"{cpus} CPU core" if cpus == 1 else f"{cpus} CPU cores"


def generate_readme(cfg: VMConfig) -> GeneratedFile:
    """Generate README.md describing how to start and stop the VM."""
    content = f"""\
# Ubuntu ARM64 Vagrant Project

This project sets up an Ubuntu {cfg.ubuntu_release} ARM64 virtual machine using Vagrant and Parallels.

## Requirements

- macOS with Apple Silicon (M1/M2/M3)
- Parallels Desktop installed
- Vagrant installed

## Getting Started

1. Run the setup script:
   ```
   ./setup.sh
   ```

2. Connect to the VM:
   ```
   vagrant ssh
   ```

3. When finished, you can stop the VM with:
   ```
   vagrant halt
   ```

4. Or destroy it completely:
   ```
   vagrant destroy
   ```

## Note for Students

This VM is pre-configured with:
- Ubuntu {cfg.ubuntu_release} LTS (ARM64)
- {_memory_label(cfg.memory)}
- {_cpu_label(cfg.cpus)}
- Username: vagrant
- Password: vagrant
- SSH enabled
"""

    return GeneratedFile(
        path=f"{cfg.output_dir}/README.md",
        content=content,
        reason="README with setup and teardown instructions",
    )
