"""Generate example project bundles for testing and demonstration.

Requires the package to be installed (``pip install -e .``).
"""

from pathlib import Path

from boatwire_engine.io.bundle import init_bundle
from boatwire_engine.io.templates import TEMPLATES, get_template


def generate_bundle(name: str, output_dir: Path) -> Path:
    """Write the named template as a bundle under ``output_dir``."""
    print(f"Generating {name} bundle...")
    project, settings = get_template(name)
    bundle_path = output_dir / name
    init_bundle(bundle_path, project, settings)
    print(f"✓ Created {bundle_path}")
    return bundle_path


def main():
    """Generate all example bundles."""
    output_dir = Path(__file__).parent.parent / "examples" / "bundles"
    output_dir.mkdir(parents=True, exist_ok=True)

    for name in TEMPLATES:
        generate_bundle(name, output_dir)

    print("\n✓ All example bundles generated successfully")


if __name__ == "__main__":
    main()
