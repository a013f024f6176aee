"""Job Fetcher - job postings from the job service."""

import logging
from typing import Any, Dict, List, Optional

from core.clients.base import PeerClient, UpstreamError

logger = logging.getLogger(__name__)


class JobFetcher(PeerClient):
    """Reads `GET /jobs` and returns the `jobs` list (possibly empty)."""

    service_name = "job-service"

    def fetch_jobs(
        self,
        token: str,
        limit: int = 100,
        page: int = 1,
        analyzed_only: bool = False,
        extra_params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"limit": limit, "page": page, "status": "active"}
        if analyzed_only:
            params["analyzed_only"] = "true"
        if extra_params:
            params.update(extra_params)

        data = self._get_json("/jobs", token=token, params=params)
        jobs = data.get("jobs") if isinstance(data, dict) else None
        if jobs is None:
            jobs = []
        if not isinstance(jobs, list):
            raise UpstreamError(self.service_name, "'jobs' is not a list", status_code=200)

        logger.info(f"Fetched {len(jobs)} jobs from job service")
        return jobs[:limit]
