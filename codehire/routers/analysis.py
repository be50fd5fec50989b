# codehire/routers/analysis.py
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from codehire.schemas.analysis import CodeReviewIn, CodeReviewResult, ResumeAnalysisResult
from codehire.services.analysis_service import AnalysisService

router = APIRouter(tags=["Analysis"])

MAX_RESUME_BYTES = 5 * 1024 * 1024


def get_analysis_service(request: Request) -> AnalysisService:
    return AnalysisService(request.app.state.analysis_provider)


@router.post("/code-review", response_model=CodeReviewResult)
def review_code(
    payload: CodeReviewIn,
    service: AnalysisService = Depends(get_analysis_service),
):
    """
    AI code review.

    Body:
      - code: source to review (required)
      - language: optional hint, e.g. "python"
    """
    return service.review_code(payload.code, payload.language)


@router.post("/resume-analysis", response_model=ResumeAnalysisResult)
def analyze_resume(
    file: UploadFile | None = File(default=None),
    service: AnalysisService = Depends(get_analysis_service),
):
    """
    AI resume analysis from an uploaded plain-text resume.

    Rules:
      - .txt / text/plain only
      - at most 5MB
    """
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided. Please upload a resume file.",
        )

    filename = (file.filename or "").lower()
    if file.content_type != "text/plain" and not filename.endswith(".txt"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Please upload a TXT file.",
        )

    content = file.file.read(MAX_RESUME_BYTES + 1)
    if len(content) > MAX_RESUME_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File size exceeds 5MB. Please upload a smaller file.",
        )

    return service.analyze_resume(content.decode("utf-8", errors="replace"))
