# codehire/services/analysis_service.py
import json
import logging
import re
from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError

from codehire.core.llm_client import AnalysisProvider
from codehire.schemas.analysis import (
    CareerInsight,
    CodeIssue,
    CodeReviewResult,
    IndustryComparison,
    Keywords,
    ResumeAnalysisResult,
    ResumeSections,
    SalaryEstimate,
    SectionFeedback,
    SkillMatch,
)

logger = logging.getLogger(__name__)

MIN_RESUME_CHARS = 50
MAX_RESUME_CHARS = 10_000

CODE_REVIEW_SYSTEM_PROMPT = (
    "You are an expert code reviewer. Analyze code thoroughly and return only "
    "valid JSON without any markdown formatting or code blocks."
)

CODE_REVIEW_PROMPT = """\
Review the following {language} for bugs, security problems, performance
issues, structure and best practices. Respond with a JSON object of this shape:

{{
  "score": <0-100>,
  "issues": [{{"type": "error|warning|info",
              "category": "bug|performance|security|quality|structure",
              "message": "...", "severity": "high|medium|low",
              "line": <number or null>, "suggestion": "..."}}],
  "suggestions": ["..."],
  "codeQuality": {{"readability": <0-100>, "maintainability": <0-100>,
                  "performance": <0-100>, "security": <0-100>}},
  "bestPractices": ["..."],
  "securityAnalysis": {{"vulnerabilities": ["..."],
                       "riskLevel": "critical|high|medium|low",
                       "recommendations": ["..."]}},
  "performanceInsights": {{"slowPatterns": ["..."], "optimizations": ["..."]}},
  "refactoringOpportunities": ["..."]
}}

Be specific and actionable, include line numbers where possible and focus on
real issues rather than style preferences.

Code to review:
```{fence}
{code}
```

Return ONLY the JSON object."""

RESUME_SYSTEM_PROMPT = (
    "You are an expert resume analyzer and career coach. Analyze resumes "
    "thoroughly and return only valid JSON without any markdown formatting."
)

RESUME_PROMPT = """\
Act as an ATS (applicant tracking system) analyzer and career coach. Evaluate
the resume below and respond with a JSON object of this shape:

{{
  "atsScore": <0-100>,
  "jobMatchScore": <0-100>,
  "skillMatches": [{{"skill": "...", "match": <0-100>,
                    "demand": "high|medium|low",
                    "category": "technical|soft|tools|domain"}}],
  "strengths": ["..."],
  "improvements": ["..."],
  "sections": {{
    "contactInfo": {{"score": <0-100>, "status": "good|needs-improvement|missing", "feedback": "..."}},
    "summary": {{...}}, "experience": {{...}}, "education": {{...}}, "skills": {{...}}
  }},
  "keywords": {{"present": ["..."], "missing": ["..."]}},
  "careerInsights": [{{"title": "...", "description": "...", "priority": "high|medium|low"}}],
  "salaryEstimate": {{"min": <number>, "max": <number>, "average": <number>, "currency": "$"}},
  "industryComparison": {{"percentile": <0-100>, "benchmark": "..."}},
  "coverLetter": "3-4 paragraph cover letter tailored to the candidate",
  "actionableSteps": ["..."]
}}

Include 5-8 skill matches and 6-10 actionable steps ordered by impact. Base
scores and salary estimates on the resume content.

Resume content:
{resume}

Return ONLY the JSON object."""

_FENCE = re.compile(r"```(?:json)?\n?")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the model may wrap its JSON in."""
    return _FENCE.sub("", text.strip()).strip()


def _drop_nulls(value: Any) -> Any:
    """Remove null entries so model defaults apply to them."""
    if isinstance(value, dict):
        return {k: _drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_nulls(v) for v in value if v is not None]
    return value


def _load_json_object(raw: str) -> dict[str, Any] | None:
    try:
        data = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError as exc:
        logger.error("Analysis response is not valid JSON: %s", exc)
        return None
    if not isinstance(data, dict):
        logger.error("Analysis response is not a JSON object")
        return None
    return _drop_nulls(data)


def fallback_code_review() -> CodeReviewResult:
    return CodeReviewResult(
        issues=[
            CodeIssue(
                type="warning",
                category="quality",
                message="Unable to perform detailed analysis. Please try again.",
                severity="medium",
            )
        ],
        suggestions=[
            "Ensure code is properly formatted",
            "Try analyzing smaller code sections",
        ],
        best_practices=[
            "Follow language-specific conventions",
            "Add proper error handling",
        ],
    )


def parse_code_review(raw: str) -> CodeReviewResult:
    """
    Turn raw model output into a complete CodeReviewResult.

    Missing or null fields take their defaults; output that is not a
    usable JSON object yields the canned fallback review.
    """
    data = _load_json_object(raw)
    if data is None:
        return fallback_code_review()
    try:
        return CodeReviewResult.model_validate(data)
    except ValidationError as exc:
        logger.error("Code review response has unexpected types: %s", exc)
        return fallback_code_review()


FALLBACK_COVER_LETTER = """\
Dear Hiring Manager,

I am writing to express my interest in joining your team. With my background \
in [your field] and proven track record of success, I am confident in my \
ability to contribute effectively to your organization.

Throughout my career, I have developed strong skills in [relevant skills] and \
have consistently delivered results. My experience has equipped me with the \
knowledge and expertise needed to excel in challenging environments.

I am excited about the opportunity to bring my skills and experience to your \
organization and would welcome the chance to discuss how I can contribute to \
your team's success.

Thank you for your consideration.

Sincerely,
[Your Name]"""


def fallback_resume_analysis() -> ResumeAnalysisResult:
    """Generic but complete analysis used when the model output is unusable."""
    return ResumeAnalysisResult(
        skill_matches=[
            SkillMatch(skill="Communication", match=75, demand="high", category="soft"),
            SkillMatch(skill="Problem Solving", match=70, demand="high", category="soft"),
            SkillMatch(skill="Teamwork", match=72, demand="medium", category="soft"),
        ],
        strengths=[
            "Resume shows relevant work experience",
            "Professional formatting is present",
        ],
        improvements=[
            "Add more quantifiable achievements with metrics",
            "Include relevant keywords for ATS optimization",
            "Expand the skills section with technical competencies",
            "Add a professional summary at the top",
        ],
        sections=ResumeSections(
            contact_info=SectionFeedback(score=80, status="good", feedback="Contact information is present"),
            summary=SectionFeedback(score=60, feedback="Consider adding a professional summary section"),
            experience=SectionFeedback(score=75, status="good", feedback="Work experience section is present"),
            education=SectionFeedback(score=70, status="good", feedback="Education section is included"),
            skills=SectionFeedback(score=65, feedback="Skills section could be more detailed"),
        ),
        keywords=Keywords(
            present=["experience", "education", "skills"],
            missing=["leadership", "project management", "communication", "problem-solving"],
        ),
        career_insights=[
            CareerInsight(
                title="Strengthen Your Technical Skills",
                description=(
                    "Consider adding more specific technical skills relevant to "
                    "your target roles to improve your competitiveness"
                ),
                priority="high",
            ),
            CareerInsight(
                title="Quantify Your Achievements",
                description=(
                    "Add metrics and numbers to demonstrate the impact of your "
                    'work (e.g., "Increased sales by 25%")'
                ),
                priority="high",
            ),
            CareerInsight(
                title="Optimize for ATS Systems",
                description="Include industry-standard keywords that match job descriptions in your field",
            ),
        ],
        salary_estimate=SalaryEstimate(min=55000, max=85000, average=70000),
        industry_comparison=IndustryComparison(
            percentile=60,
            benchmark="Your resume is competitive for mid-level positions in your field",
        ),
        cover_letter=FALLBACK_COVER_LETTER,
        actionable_steps=[
            "Add a professional summary section at the top of your resume",
            "Quantify achievements with specific numbers and metrics",
            "Include 8-12 relevant technical and soft skills",
            'Use action verbs to start each bullet point (e.g., "Led", "Developed", "Increased")',
            "Tailor your resume keywords to match target job descriptions",
            "Ensure consistent formatting throughout the document",
            "Add relevant certifications or training courses",
            "Include links to professional profiles (LinkedIn, portfolio)",
        ],
    )


def parse_resume_analysis(raw: str) -> ResumeAnalysisResult:
    """Same contract as parse_code_review, for resume analyses."""
    data = _load_json_object(raw)
    if data is None:
        return fallback_resume_analysis()
    try:
        return ResumeAnalysisResult.model_validate(data)
    except ValidationError as exc:
        logger.error("Resume analysis response has unexpected types: %s", exc)
        return fallback_resume_analysis()


class AnalysisService:
    """
    Code review and resume analysis on top of an AnalysisProvider.

    The provider is injected so the rest of the app only ever sees the
    defaulted result models, never raw model output.
    """

    def __init__(self, provider: AnalysisProvider):
        self.provider = provider

    def review_code(self, code: str | None, language: str | None = None) -> CodeReviewResult:
        if not code:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Code is required",
            )
        prompt = CODE_REVIEW_PROMPT.format(
            language=language or "code",
            fence=language or "",
            code=code,
        )
        raw = self.provider.complete(CODE_REVIEW_SYSTEM_PROMPT, prompt, temperature=0.3)
        return parse_code_review(raw)

    def analyze_resume(self, resume_text: str) -> ResumeAnalysisResult:
        """
        Analyze plain resume text.

        Raises:
            HTTPException(400): if the text is too short to analyze.
        """
        resume_text = resume_text.strip()
        if len(resume_text) < MIN_RESUME_CHARS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    "Resume text is too short or could not be extracted. "
                    "Please ensure your file contains readable text content."
                ),
            )
        if len(resume_text) > MAX_RESUME_CHARS:
            resume_text = resume_text[:MAX_RESUME_CHARS] + "..."

        prompt = RESUME_PROMPT.format(resume=resume_text)
        raw = self.provider.complete(RESUME_SYSTEM_PROMPT, prompt, temperature=0.4)
        return parse_resume_analysis(raw)
