"""
setup.sh generator — idempotent plugin/box install, then ``vagrant up``.
"""

from __future__ import annotations

from armvm.core.models.template import GeneratedFile
from armvm.core.models.vm import PROVIDER, PROVIDER_PLUGIN, VMConfig


def generate_setup_script(cfg: VMConfig) -> GeneratedFile:
    """Generate the executable setup script that boots the VM."""
    content = f"""\
#!/bin/bash
set -e

cd "$(dirname "$0")"

# Check for {PROVIDER_PLUGIN} plugin
if ! vagrant plugin list | grep -q {PROVIDER_PLUGIN}; then
  echo "==> Installing {PROVIDER_PLUGIN} plugin"
  vagrant plugin install {PROVIDER_PLUGIN}
fi

# Add the box if not already added
if ! vagrant box list | grep -q {cfg.box}; then
  echo "==> Adding Ubuntu ARM64 box"
  vagrant box add {cfg.box} --provider {PROVIDER}
fi

# Start the VM
echo "==> Starting Ubuntu ARM64 VM"
vagrant up --provider={PROVIDER}

# Display connection information
echo "==> VM is ready! You can connect with:"
echo "    vagrant ssh"
"""

    return GeneratedFile(
        path=f"{cfg.output_dir}/setup.sh",
        content=content,
        executable=True,
        reason="Setup script: plugin check, box add, vagrant up",
    )
