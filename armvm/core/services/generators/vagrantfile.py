"""
Vagrantfile generator — Parallels provider with a boot-time banner.
"""

from __future__ import annotations

from armvm.core.models.template import GeneratedFile
from armvm.core.models.vm import PROVIDER, VMConfig


def generate_vagrantfile(cfg: VMConfig) -> GeneratedFile:
    """Generate the Vagrantfile for *cfg*.

    The ``always`` provisioner prints the guest IP and credentials on
    every ``vagrant up``.
    """
    customize = (
        '    prl.customize ["set", :id, "--faster-vm", "on"]\n'
        if cfg.faster_vm
        else ""
    )

    content = f"""\
Vagrant.configure("2") do |config|
  config.vm.box = "{cfg.box}"
  config.vm.box_version = "{cfg.box_version}"

  config.vm.provider "{PROVIDER}" do |prl|
    prl.memory = {cfg.memory}
    prl.cpus = {cfg.cpus}
{customize}\
  end

  # Display VM IP address when it boots
  config.vm.provision "shell", run: "always", inline: <<-SHELL
    echo "\\033[0;32m"
    echo "============================================="
    echo "VM is ready! Access information:"
    echo "IP address: $(hostname -I | awk '{{print $1}}')"
    echo "SSH: vagrant ssh"
    echo "Username: vagrant"
    echo "Password: vagrant"
    echo "============================================="
    echo "\\033[0m"
  SHELL
end
"""

    return GeneratedFile(
        path=f"{cfg.output_dir}/Vagrantfile",
        content=content,
        reason=f"Vagrantfile for box {cfg.box} ({cfg.memory}MB, {cfg.cpus} CPUs)",
    )
