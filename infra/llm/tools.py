RANK_CANDIDATES_TOOL = {
    "type": "function",
    "function": {
        "name": "rank_candidates",
        "description": "Rank and score candidates for a job position",
        "parameters": {
            "type": "object",
            "properties": {
                "matches": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "candidate_id": {"type": "string", "description": "The candidate's user ID"},
                            "match_score": {"type": "number", "description": "Match score from 0-100"},
                            "strengths": {
                                "type": "array", "items": {"type": "string"},
                                "description": "Key strengths that match the job",
                            },
                            "concerns": {
                                "type": "array", "items": {"type": "string"},
                                "description": "Potential concerns or gaps",
                            },
                            "summary": {
                                "type": "string",
                                "description": "Brief summary of why they're a good/bad match",
                            },
                        },
                        "required": ["candidate_id", "match_score", "strengths", "concerns", "summary"],
                    },
                },
            },
            "required": ["matches"],
            "additionalProperties": False,
        },
    },
}


EXTRACT_JOB_INFO_TOOL = {
    "type": "function",
    "function": {
        "name": "extract_job_info",
        "description": "Extract structured job posting information from a description",
        "parameters": {
            "type": "object",
            "properties": {
                "title": {"type": "string", "description": "Job title (e.g., 'Senior Software Engineer')"},
                "location": {
                    "type": "string",
                    "description": "Job location (e.g., 'Remote', 'New York, NY', 'Hybrid - San Francisco')",
                },
                "salaryMin": {"type": "number", "description": "Minimum salary in USD (annual)"},
                "salaryMax": {"type": "number", "description": "Maximum salary in USD (annual)"},
                "description": {
                    "type": "string",
                    "description": "Detailed job description including responsibilities and what the role entails",
                },
                "requirements": {
                    "type": "string",
                    "description": "Key requirements, qualifications, and skills needed",
                },
            },
            "required": ["title", "location", "salaryMin", "salaryMax", "description", "requirements"],
            "additionalProperties": False,
        },
    },
}
