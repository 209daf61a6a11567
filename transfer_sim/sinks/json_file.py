"""JSON Lines sink for auditing transfer events."""

import json
from pathlib import Path
from typing import TextIO

from transfer_sim.exceptions import SinkError
from transfer_sim.models import Event
from transfer_sim.sinks.serialization import to_dict


class JsonFileSink:
    """Append events to ``<output_dir>/<filename>`` as JSON Lines."""

    def __init__(
        self,
        output_dir: str | Path,
        filename: str = "transfers.jsonl",
        pretty: bool = False,
    ) -> None:
        """Initialize JSON file sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory to write the audit file into.
        filename : str
            Audit file name.
        pretty : bool
            Indent each JSON document (one document may then span lines).
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.file_path = self.output_dir / filename
        self.pretty = pretty
        self._handle: TextIO | None = None
        self._count = 0

    def write_event(self, event: Event) -> None:
        """Append one event and flush."""
        data = to_dict(event)
        try:
            if self._handle is None:
                self._handle = open(self.file_path, "a", encoding="utf-8")
            if self.pretty:
                self._handle.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")
            else:
                self._handle.write(json.dumps(data, ensure_ascii=False) + "\n")
            self._handle.flush()
        except OSError as exc:
            raise SinkError(f"Failed to write event to {self.file_path}: {exc}") from exc
        self._count += 1

    @property
    def count(self) -> int:
        return self._count

    def close(self) -> None:
        """Close the file and print a summary."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        print(f"Audit events written to: {self.file_path} ({self._count} events)")
