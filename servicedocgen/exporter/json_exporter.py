"""JSON exporter of the analyzed service model."""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from servicedocgen import __version__
from servicedocgen.descriptor.models import ServicesDescriptor


class JsonExporter:
    """Export the analyzed services to JSON."""

    def to_dict(self, services: ServicesDescriptor) -> Dict[str, Any]:
        """Model dump with metadata."""
        return {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "generator_version": __version__,
                "services": len(services.services),
                "operations": len(services.operations),
            },
            "model": services.to_dict(),
        }

    def export(self, output_file: Path, services: ServicesDescriptor) -> None:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(services), f, indent=2, default=str)
