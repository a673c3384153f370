"""
Generators — produce the VM project files from a ``VMConfig``.

Each generator module exposes a ``generate_*()`` function that returns
a ``GeneratedFile``. ``render()`` dispatches by template kind.
"""

from __future__ import annotations

from collections.abc import Callable

from armvm.core.models.template import GeneratedFile
from armvm.core.models.vm import VMConfig
from armvm.core.services.generators.packer_template import generate_packer_template
from armvm.core.services.generators.readme import generate_readme
from armvm.core.services.generators.setup_script import generate_setup_script
from armvm.core.services.generators.vagrantfile import generate_vagrantfile

TEMPLATES: dict[str, Callable[[VMConfig], GeneratedFile]] = {
    "packer": generate_packer_template,
    "vagrantfile": generate_vagrantfile,
    "setup": generate_setup_script,
    "readme": generate_readme,
}


def render(kind: str, cfg: VMConfig) -> GeneratedFile:
    """Render one template kind.

    Raises:
        ValueError: If *kind* is not a known template.
    """
    try:
        generator = TEMPLATES[kind]
    except KeyError:
        raise ValueError(
            f"Unknown template '{kind}'. Valid: {', '.join(sorted(TEMPLATES))}"
        ) from None
    return generator(cfg)


def vm_files(cfg: VMConfig) -> list[GeneratedFile]:
    """The files a Packer build writes into the output directory, in order."""
    return [
        generate_vagrantfile(cfg),
        generate_setup_script(cfg),
        generate_readme(cfg),
    ]
