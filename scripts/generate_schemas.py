"""Generate the JSON schema of the descriptor format and save it to schemas/."""

import json
from pathlib import Path

from driftsafe.kernel.descriptor import ModelDescriptor


def generate_schemas():
    """Generate JSON schemas for descriptor files."""
    schemas_dir = Path(__file__).parent.parent / "schemas"
    schemas_dir.mkdir(exist_ok=True)

    descriptor_schema = ModelDescriptor.model_json_schema()
    descriptor_schema_path = schemas_dir / "model_descriptor.schema.json"
    with open(descriptor_schema_path, 'w', encoding='utf-8') as f:
        json.dump(descriptor_schema, f, indent=2, ensure_ascii=False)
    print(f"Generated: {descriptor_schema_path}")

    print("\nSchema generation complete!")


if __name__ == "__main__":
    generate_schemas()
