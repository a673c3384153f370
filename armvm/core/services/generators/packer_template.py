"""
Packer template generator — a ``null`` source whose ``shell-local``
provisioners write the VM project files.

The template does not build an image. Each provisioner heredocs one of
the files from the sibling generators into the output directory, so a
``packer build`` leaves exactly what ``vm_files()`` would write.
"""

from __future__ import annotations

from armvm.core.models.template import GeneratedFile
from armvm.core.models.vm import VMConfig
from armvm.core.services.generators.readme import generate_readme
from armvm.core.services.generators.setup_script import generate_setup_script
from armvm.core.services.generators.vagrantfile import generate_vagrantfile

HEREDOC_MARKER = "EOT"

_PLUGIN_SOURCE = "github.com/hashicorp/vagrant"


def hcl_quote(value: str) -> str:
    """Quote *value* as an HCL string literal.

    Template sequences (``${`` and ``%{``) are escaped so packer writes
    them through verbatim.
    """
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("${", "$${")
        .replace("%{", "%%{")
    )
    return f'"{escaped}"'


def _heredoc_commands(target: str, content: str) -> list[str]:
    lines = content.splitlines()
    if HEREDOC_MARKER in lines:
        raise ValueError(f"{target}: content contains the heredoc marker {HEREDOC_MARKER!r}")
    return [f"cat > {target} << '{HEREDOC_MARKER}'", *lines, HEREDOC_MARKER]


def _provisioner(comment: str, commands: list[str]) -> str:
    inline = ",\n".join(f"      {hcl_quote(c)}" for c in commands)
    return f"""\
  # {comment}
  provisioner "shell-local" {{
    inline = [
{inline}
    ]
  }}
"""


def generate_packer_template(cfg: VMConfig) -> GeneratedFile:
    """Generate ``<name>.pkr.hcl`` for *cfg*."""
    vagrantfile = generate_vagrantfile(cfg)
    setup = generate_setup_script(cfg)
    readme = generate_readme(cfg)

    provisioners = [
        _provisioner(
            "Create Vagrantfile",
            [
                "echo '==> Creating Vagrantfile'",
                f"mkdir -p {cfg.output_dir}",
                *_heredoc_commands(vagrantfile.path, vagrantfile.content),
            ],
        ),
        _provisioner(
            "Create setup script",
            [
                "echo '==> Creating setup script'",
                *_heredoc_commands(setup.path, setup.content),
                f"chmod +x {setup.path}",
            ],
        ),
        _provisioner(
            "Create README file",
            [
                "echo '==> Creating README'",
                *_heredoc_commands(readme.path, readme.content),
            ],
        ),
    ]
    body = "\n".join(provisioners)

    content = f"""\
packer {{
  required_plugins {{
    vagrant = {{
      version = {hcl_quote(cfg.vagrant_plugin_version)}
      source  = "{_PLUGIN_SOURCE}"
    }}
  }}
}}

# This is a special "null" builder that doesn't actually build a VM
# Instead, we'll use provisioners to set up our Vagrant environment
source "null" "{cfg.name}" {{
  communicator = "none"
}}

build {{
  sources = ["{cfg.source_ref}"]
  
{body}\
}}
"""

    return GeneratedFile(
        path=cfg.template_file,
        content=content,
        reason=f"Packer template writing {len(provisioners)} files into {cfg.output_dir}/",
    )
