"""
Basic Model Zoo Example

This example demonstrates the core workflow:
1. Build the zoo on the MxNet repository
2. Inspect the loaders and their shared repository
3. List published ResNet artifacts
4. Download one and load its parameters

Steps 3 and 4 need network access to the repository.
"""

import sys
from pathlib import Path

# Add parent directory to path if running directly
sys.path.insert(0, str(Path(__file__).parent.parent))

from modelzoo import ModelZoo, ModelFamily, setup_logging
from modelzoo.exceptions import ModelZooError


def main():
    print("=" * 60)
    print("ModelZoo - Basic Usage Example")
    print("=" * 60)

    setup_logging("INFO")
    zoo = ModelZoo.create()

    print(f"\nRepository: {zoo.repository}")
    print("-" * 60)
    for family in ModelFamily:
        loader = zoo.get_loader(family)
        print(f"  {family.name:<20} {loader.mrl.path}")

    print("\nPublished ResNet artifacts:")
    try:
        for artifact in zoo.RESNET.list_artifacts():
            print(f"  {artifact.summary()}")

        model = zoo.RESNET.load_model({"layers": "18"})
        params = model.load_parameters()
        print(f"\nLoaded {model.name}: {len(params)} tensors from {model.model_dir}")
    except ModelZooError as e:
        print(f"\n[ERROR] {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
