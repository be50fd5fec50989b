# codehire/schemas/analysis.py
"""
Result shapes for the analysis tools.

Every field has a default so a partial (or unusable) provider response
still produces a complete object. Nested sections default independently:
a response with only `codeQuality.security` keeps the other three scores
at their defaults.
"""

from pydantic import Field

from codehire.schemas.user import CamelModel

DEFAULT_SCORE = 70


# ---------- Code review ----------


class CodeIssue(CamelModel):
    type: str = "info"  # error | warning | info
    category: str = "quality"  # bug | performance | security | quality | structure
    message: str = ""
    severity: str = "low"  # high | medium | low
    line: int | None = None
    suggestion: str | None = None


class CodeQuality(CamelModel):
    readability: float = DEFAULT_SCORE
    maintainability: float = DEFAULT_SCORE
    performance: float = DEFAULT_SCORE
    security: float = DEFAULT_SCORE


class SecurityAnalysis(CamelModel):
    vulnerabilities: list[str] = Field(default_factory=list)
    risk_level: str = "low"
    recommendations: list[str] = Field(default_factory=list)


class PerformanceInsights(CamelModel):
    slow_patterns: list[str] = Field(default_factory=list)
    optimizations: list[str] = Field(default_factory=list)


class CodeReviewResult(CamelModel):
    score: float = DEFAULT_SCORE
    issues: list[CodeIssue] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    code_quality: CodeQuality = Field(default_factory=CodeQuality)
    best_practices: list[str] = Field(default_factory=list)
    security_analysis: SecurityAnalysis = Field(default_factory=SecurityAnalysis)
    performance_insights: PerformanceInsights = Field(default_factory=PerformanceInsights)
    refactoring_opportunities: list[str] = Field(default_factory=list)


class CodeReviewIn(CamelModel):
    code: str | None = None
    language: str | None = None


# ---------- Resume analysis ----------


class SkillMatch(CamelModel):
    skill: str = ""
    match: float = 0
    demand: str = "medium"  # high | medium | low
    category: str = "technical"  # technical | soft | tools | domain


class SectionFeedback(CamelModel):
    score: float = DEFAULT_SCORE
    status: str = "needs-improvement"  # good | needs-improvement | missing
    feedback: str = ""


def _section(feedback: str):
    return Field(default_factory=lambda: SectionFeedback(feedback=feedback))


class ResumeSections(CamelModel):
    contact_info: SectionFeedback = _section("Contact information needs review")
    summary: SectionFeedback = _section("Professional summary could be improved")
    experience: SectionFeedback = _section("Experience section needs enhancement")
    education: SectionFeedback = _section("Education section present")
    skills: SectionFeedback = _section("Skills section needs more detail")


class Keywords(CamelModel):
    present: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


class CareerInsight(CamelModel):
    title: str = ""
    description: str = ""
    priority: str = "medium"  # high | medium | low


class SalaryEstimate(CamelModel):
    min: float = 0
    max: float = 0
    average: float = 0
    currency: str = "$"


class IndustryComparison(CamelModel):
    percentile: float = 0
    benchmark: str = ""


class ResumeAnalysisResult(CamelModel):
    ats_score: float = DEFAULT_SCORE
    job_match_score: float = DEFAULT_SCORE
    skill_matches: list[SkillMatch] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    sections: ResumeSections = Field(default_factory=ResumeSections)
    keywords: Keywords = Field(default_factory=Keywords)
    career_insights: list[CareerInsight] = Field(default_factory=list)
    salary_estimate: SalaryEstimate | None = None
    industry_comparison: IndustryComparison | None = None
    cover_letter: str = ""
    actionable_steps: list[str] = Field(default_factory=list)
