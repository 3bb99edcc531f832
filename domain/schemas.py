from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Literal, Optional, Union


def _as_str_list(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item) for item in value if item is not None]
    raise ValueError("expected a string or list of strings")


class CVAnalysis(BaseModel):
    score: float = Field(..., ge=0.0, le=100.0)
    strengths: List[str] = []
    improvements: List[str] = []
    suggestions: List[str] = []
    missing_skills: List[str] = []
    formatting_feedback: str = ""

    @field_validator("score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        return max(0.0, min(100.0, float(value)))

    @field_validator("strengths", "improvements", "suggestions", "missing_skills", mode="before")
    @classmethod
    def _ensure_list(cls, value):
        return _as_str_list(value)

    @field_validator("formatting_feedback", mode="before")
    @classmethod
    def _ensure_text(cls, value):
        if isinstance(value, list):
            return " ".join(str(v) for v in value)
        return "" if value is None else str(value)


FALLBACK_CV_ANALYSIS = CVAnalysis(
    score=70,
    strengths=["Content provided"],
    improvements=["AI analysis format issue - please try again"],
    suggestions=["Reupload CV for detailed analysis"],
    missing_skills=[],
    formatting_feedback="Analysis in progress",
)


class JobMatchScore(BaseModel):
    match_score: float = Field(..., ge=0.0, le=100.0)
    matching_skills: List[str] = []
    missing_skills: List[str] = []
    recommendation: str = ""

    @field_validator("match_score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        return max(0.0, min(100.0, float(value)))

    @field_validator("matching_skills", "missing_skills", mode="before")
    @classmethod
    def _ensure_list(cls, value):
        return _as_str_list(value)

    @field_validator("recommendation", mode="before")
    @classmethod
    def _ensure_text(cls, value):
        return "" if value is None else str(value)


class AnalyzeCVRequest(BaseModel):
    cvText: Optional[str] = None
    fileName: Optional[str] = None

class AnalyzeCVResponse(BaseModel):
    analysis: CVAnalysis

class UploadCVResponse(BaseModel):
    cv_id: str
    analysis: CVAnalysis
    matches: List[Dict] = []

class RewriteResumeRequest(BaseModel):
    cvText: Optional[str] = None
    analysis: Optional[Dict[str, Any]] = None
    targetRole: Optional[str] = None

class MatchJobsRequest(BaseModel):
    cvAnalysis: Optional[Dict[str, Any]] = None
    userId: Optional[str] = None

class MatchCandidatesRequest(BaseModel):
    jobId: Optional[str] = None

class ParseJobRequest(BaseModel):
    description: Optional[str] = None

class GithubProfileRequest(BaseModel):
    username: Optional[str] = None

class StackOverflowProfileRequest(BaseModel):
    userId: Optional[Union[int, str]] = None

class FootprintRequest(BaseModel):
    githubData: Optional[Dict[str, Any]] = None
    stackoverflowData: Optional[Dict[str, Any]] = None
    profileData: Optional[Dict[str, Any]] = None

class CareerInsightsRequest(BaseModel):
    cvAnalysis: Optional[Dict[str, Any]] = None
    applications: int = 0
    profile: Optional[Dict[str, Any]] = None
    footprintData: Optional[Dict[str, Any]] = None


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str

class InterviewChatRequest(BaseModel):
    messages: List[ChatMessage] = []
    jobTitle: Optional[str] = None

class AnalyzeBehaviorRequest(BaseModel):
    image: Optional[str] = None
    jobTitle: Optional[str] = None

class TranscribeRequest(BaseModel):
    audio: Optional[str] = None

class GenerateProfileRequest(BaseModel):
    messages: List[ChatMessage] = []
    behavioralFeedback: List[str] = []
    jobTitle: Optional[str] = None

class SaveInterviewRequest(BaseModel):
    jobTitle: str
    transcript: List[ChatMessage] = []
    aiFeedback: Optional[Dict[str, Any]] = None
    score: Optional[float] = None
    durationSeconds: Optional[int] = None
    behavioralConsent: bool = False


class ContactEmailRequest(BaseModel):
    candidateEmail: str
    candidateName: str
    subject: str
    message: str
    companyName: str
    jobTitle: Optional[str] = None
