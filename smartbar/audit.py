"""
SmartBAR - Audit and Serialisation Module.

This module provides JSON serialisation of BAR calculation runs. All
Decimal values are converted to string representation to preserve
precision during serialisation and deserialisation.

Classes:
    DecimalEncoder: JSON encoder for Decimal, datetime and BARStatus.
    AuditLogger: Manages JSON serialisation for audit and persistence.
"""

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Union

from smartbar import __version__
from smartbar.schema import (
    BARCalculation,
    BARSnapshot,
    BARStatus,
    ExpectedSpendPoint,
)


class DecimalEncoder(json.JSONEncoder):
    """
    Custom JSON encoder that converts Decimal to string.

    Preserves full precision of Decimal values by encoding them
    as strings rather than floats.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, BARStatus):
            return obj.value
        return super().default(obj)


class AuditLogger:
    """
    Manages JSON serialisation for audit and persistence.

    Every snapshot includes timestamp and version identifier so a
    pace report can be traced back to the engine that produced it.

    Example:
        >>> logger = AuditLogger()
        >>> json_str = logger.serialise_snapshot(snapshot)
        >>> restored = logger.deserialise_snapshot(json_str)
        >>> assert snapshot.calculation == restored.calculation
    """

    def __init__(self, version: str = None):
        """
        Initialises the AuditLogger.

        Args:
            version: Version identifier written to metadata.
                     Defaults to package version.
        """
        self._version = version or __version__

    def serialise_snapshot(self, snapshot: BARSnapshot) -> str:
        """
        Serialises a BARSnapshot to JSON string.

        Args:
            snapshot: Snapshot to serialise.

        Returns:
            JSON string representation.
        """
        data = self._snapshot_to_dict(snapshot)
        return json.dumps(data, cls=DecimalEncoder, indent=2)

    def deserialise_snapshot(self, json_str: str) -> BARSnapshot:
        """
        Deserialises a JSON string to BARSnapshot.

        Args:
            json_str: JSON string to deserialise.

        Returns:
            Reconstructed BARSnapshot.

        Raises:
            json.JSONDecodeError: If JSON is malformed.
            KeyError: If required fields are missing.
            ValueError: If data types are invalid.
        """
        data = json.loads(json_str)
        return self._dict_to_snapshot(data)

    def save_to_file(
        self,
        snapshot: BARSnapshot,
        file_path: Union[str, Path]
    ) -> None:
        """
        Saves a BARSnapshot to a JSON file.

        Args:
            snapshot: Snapshot to save.
            file_path: Output file path.
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        json_str = self.serialise_snapshot(snapshot)
        file_path.write_text(json_str, encoding="utf-8")

    def load_from_file(self, file_path: Union[str, Path]) -> BARSnapshot:
        """
        Loads a BARSnapshot from a JSON file.

        Args:
            file_path: Path to JSON file.

        Returns:
            Loaded BARSnapshot.

        Raises:
            FileNotFoundError: If file does not exist.
            json.JSONDecodeError: If JSON is malformed.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Audit file not found: {file_path}")

        json_str = file_path.read_text(encoding="utf-8")
        return self.deserialise_snapshot(json_str)

    def _snapshot_to_dict(self, snapshot: BARSnapshot) -> Dict[str, Any]:
        calculation = snapshot.calculation
        return {
            "metadata": {
                "timestamp": snapshot.timestamp.isoformat(),
                "version": snapshot.version,
                "generated_by": f"SmartBAR {self._version}",
            },
            "inputs": {
                "budget_name": snapshot.budget_name,
                "days_elapsed": snapshot.days_elapsed,
                "total_days": snapshot.total_days,
                "total_budget": str(snapshot.total_budget),
                "historical_periods": snapshot.historical_periods,
            },
            "result": {
                "bar": str(calculation.bar),
                "status": calculation.status.value,
                "message": calculation.message,
                "expected_spent": str(calculation.expected_spent),
                "actual_spent": str(calculation.actual_spent),
                "remaining": str(calculation.remaining),
                "days_remaining": calculation.days_remaining,
            },
            "schedule": [
                {"day": point.day, "expected_spent": str(point.expected_spent)}
                for point in snapshot.schedule
            ],
        }

    def _dict_to_snapshot(self, data: Dict[str, Any]) -> BARSnapshot:
        metadata = data["metadata"]
        inputs = data["inputs"]
        result = data["result"]

        calculation = BARCalculation(
            bar=Decimal(result["bar"]),
            status=BARStatus(result["status"]),
            message=result["message"],
            expected_spent=Decimal(result["expected_spent"]),
            actual_spent=Decimal(result["actual_spent"]),
            remaining=Decimal(result["remaining"]),
            days_remaining=result["days_remaining"],
        )

        schedule = [
            ExpectedSpendPoint(
                day=point["day"],
                expected_spent=Decimal(point["expected_spent"])
            )
            for point in data.get("schedule", [])
        ]

        return BARSnapshot(
            timestamp=datetime.fromisoformat(metadata["timestamp"]),
            version=metadata["version"],
            budget_name=inputs["budget_name"],
            days_elapsed=inputs["days_elapsed"],
            total_days=inputs["total_days"],
            total_budget=Decimal(inputs["total_budget"]),
            historical_periods=inputs["historical_periods"],
            calculation=calculation,
            schedule=schedule,
        )

    def generate_filename(self, prefix: str = "bar_audit") -> str:
        """
        Generates a timestamped filename for audit files.

        Args:
            prefix: Filename prefix. Defaults to "bar_audit".

        Returns:
            Filename like "bar_audit_2024-12-18_143052.json".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.json"
