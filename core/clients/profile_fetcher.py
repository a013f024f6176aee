"""Profile Fetcher - candidate profile from the resume service."""

import logging
from typing import Any, Dict
from urllib.parse import quote

from core.clients.base import PeerClient, NotFound, UpstreamError

logger = logging.getLogger(__name__)


class ProfileFetcher(PeerClient):
    """Reads `GET /resumes/{id}/profile` and returns its `profileAnalysis`."""

    service_name = "resume-service"

    def fetch_profile(self, resume_id: str, token: str) -> Dict[str, Any]:
        """
        Fetch the structured candidate profile for a resume.

        Raises:
            NotFound: resume unknown, or not analyzed yet (no profileAnalysis).
            UpstreamUnavailable / UpstreamError: transport or service failure.
        """
        data = self._get_json(f"/resumes/{quote(str(resume_id), safe='')}/profile", token=token)
        profile = data.get("profileAnalysis") if isinstance(data, dict) else None
        if not profile:
            raise NotFound(self.service_name, f"resume {resume_id} has no profile analysis", status_code=404)

        if not isinstance(profile, dict):
            raise UpstreamError(self.service_name, "profileAnalysis is not an object", status_code=200)

        # personal info and filename sometimes live beside the analysis
        profile = dict(profile)
        if "personalInfo" not in profile and isinstance(data.get("personalInfo"), dict):
            profile["personalInfo"] = data["personalInfo"]
        if "original_name" not in profile and data.get("original_name"):
            profile["original_name"] = data["original_name"]

        logger.info(
            f"Fetched profile for resume {resume_id}: "
            f"{len(profile.get('coreCompetencies') or [])} competencies"
        )
        return profile
