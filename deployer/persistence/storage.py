"""Deployment report storage."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from deployer.core.models import DeploymentReport

logger = logging.getLogger(__name__)


class DeploymentEncoder(json.JSONEncoder):
    """JSON encoder that handles datetimes and raw bytes."""

    def default(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, bytes):
            return "0x" + obj.hex()
        return super().default(obj)


class DeploymentStorage:
    """
    Persistent storage for deployment reports.

    Uses JSON files so operators can read them and pick the registry address
    to re-attach to on the next run.
    Directory structure:
        storage_dir/
            {chain_id}/
                {timestamp}.json
    """

    def __init__(self, storage_dir: Path):
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _chain_dir(self, chain_id: Optional[int]) -> Path:
        return self.storage_dir / (str(chain_id) if chain_id is not None else "unknown")

    def save_report(self, report: DeploymentReport, report_id: Optional[str] = None) -> Path:
        """
        Save a deployment report.

        Args:
            report: Report to save
            report_id: Optional custom ID (default: creation timestamp)

        Returns:
            Path of the written file
        """
        if report_id is None:
            report_id = report.created_at.strftime("%Y%m%d_%H%M%S_%f")

        chain_dir = self._chain_dir(report.chain_id)
        chain_dir.mkdir(parents=True, exist_ok=True)
        file_path = chain_dir / f"{report_id}.json"

        data = report.to_dict()
        data["_id"] = report_id

        with open(file_path, "w") as f:
            json.dump(data, f, cls=DeploymentEncoder, indent=2)

        logger.info(f"Saved deployment report: {file_path}")
        return file_path

    def load_report(self, chain_id: Optional[int], report_id: str) -> Optional[DeploymentReport]:
        file_path = self._chain_dir(chain_id) / f"{report_id}.json"

        if not file_path.exists():
            logger.warning(f"Deployment report not found: {file_path}")
            return None

        with open(file_path, "r") as f:
            data = json.load(f)

        data.pop("_id", None)
        return DeploymentReport.from_dict(data)

    def list_reports(self, chain_id: Optional[int]) -> List[Dict[str, Any]]:
        """
        List saved reports for a chain, newest first.

        Returns:
            List of report summaries (id, stage, registry, created_at)
        """
        chain_dir = self._chain_dir(chain_id)
        if not chain_dir.exists():
            return []

        reports = []
        for file_path in chain_dir.glob("*.json"):
            with open(file_path, "r") as f:
                data = json.load(f)

            reports.append({
                "id": data.get("_id", file_path.stem),
                "stage": data.get("stage"),
                "registry": data.get("registry"),
                "created_at": data.get("created_at", ""),
            })

        reports.sort(key=lambda x: x.get("created_at") or "", reverse=True)
        return reports

    def load_latest(self, chain_id: Optional[int]) -> Optional[DeploymentReport]:
        """Get the most recent report for a chain."""
        reports = self.list_reports(chain_id)

        if not reports:
            return None

        return self.load_report(chain_id, reports[0]["id"])
