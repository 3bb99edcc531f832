import logging
from typing import Dict, Optional

from domain.errors import ValidationFailed
from infra.llm.client import call_tool
from infra.llm.prompts import JOB_PARSE_SYSTEM
from infra.llm.tools import EXTRACT_JOB_INFO_TOOL

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_CHARS = 20


async def parse_job_description(description: Optional[str]) -> Dict:
    if not description or len(description.strip()) < MIN_DESCRIPTION_CHARS:
        raise ValidationFailed("Description must be at least 20 characters")
    job_data = await call_tool(
        JOB_PARSE_SYSTEM,
        f"Parse this job description and extract the information: {description}",
        EXTRACT_JOB_INFO_TOOL,
    )
    logger.info("Extracted job data: %s", job_data.get("title"))
    return job_data
