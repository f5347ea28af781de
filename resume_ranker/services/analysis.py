"""
Analysis orchestration: resume parsing on upload and batch scoring of a
session's candidates against one job requirement.

A failure while parsing downgrades the candidate to raw text; a failure while
scoring is recorded for that candidate only. Only a missing API key, an
unknown session or an empty session abort a batch.
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from functools import reduce
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from resume_ranker.helpers.decoding import ParsedResume, decode_parsed_resume, decode_scoring_response
from resume_ranker.helpers.parsing import SUPPORTED_EXTENSIONS, extract_text, is_supported
from resume_ranker.helpers.prompts import build_parse_prompt, select_scoring_prompt, uses_direct_scoring
from resume_ranker.models.models import (
    AnalysisResult, BatchResult, Candidate, CandidateOutcome, Education, EducationAnalysis,
    Experience, ExperienceAnalysis, JobRequirement, Skill, SkillsAnalysis, UploadSummary,
)
from resume_ranker.services.providers import LLMClient
from resume_ranker.services.scoring import compute_total, rank_results
from resume_ranker.services.session_store import SessionStore
from resume_ranker.utils.exceptions import (
    EmptyExtractionError, MalformedModelResponseError, NoCandidatesError, NotConfiguredError,
    ProviderError, ResumeRankerError, SessionNotFoundError, UnsupportedFormatError,
)
from resume_ranker.utils.logging_config import get_logger, PerformanceMonitor
from resume_ranker.utils.utils import as_text, parse_date

logger = get_logger(__name__)

UNKNOWN_NAME = "Unknown"
DEFAULT_TOP_N = 10


def candidate_from_parsed(parsed: ParsedResume, raw_text: str, file_name: str) -> Candidate:
    skills = [
        Skill(name=s.name, years_of_experience=max(0, s.years_of_experience), level=s.level)
        for s in (parsed.skills or [])
    ]
    experiences = []
    for e in parsed.experiences or []:
        end = as_text(e.end_date)
        experiences.append(Experience(
            company_name=e.company_name,
            position=e.position,
            start_date=parse_date(e.start_date),
            end_date=parse_date(end) if end and end.lower() != "null" else None,
            description=e.description or "",
            is_current=e.is_current,
        ))
    education = None
    if parsed.education is not None:
        education = Education(
            institution=parsed.education.institution,
            degree=parsed.education.degree,
            field_of_study=parsed.education.field_of_study,
            graduation_year=parsed.education.graduation_year,
            gpa=parsed.education.gpa,
        )
    return Candidate(
        full_name=as_text(parsed.full_name) or UNKNOWN_NAME,
        email=as_text(parsed.email),
        phone=as_text(parsed.phone),
        file_name=file_name,
        raw_content=raw_text,
        parsed=True,
        skills=skills,
        experiences=experiences,
        education=education,
    )


def _fold_outcome(batch: BatchResult, outcome: CandidateOutcome) -> BatchResult:
    if outcome.succeeded:
        return batch.model_copy(update={
            "successfully_analyzed": batch.successfully_analyzed + 1,
            "results": batch.results + [outcome.result],
        })
    return batch.model_copy(update={
        "failed_to_analyze": batch.failed_to_analyze + 1,
        "errors": batch.errors + [outcome.error],
    })


def accumulate_outcomes(session_id: str, outcomes: Sequence[CandidateOutcome],
                        analyzed_at: datetime = None) -> BatchResult:
    """Fold per-candidate outcomes into a batch summary with ranked results."""
    start = BatchResult(
        session_id=session_id,
        total_candidates=len(outcomes),
        analyzed_at=analyzed_at or datetime.utcnow(),
    )
    batch = reduce(_fold_outcome, outcomes, start)
    return batch.model_copy(update={"results": rank_results(batch.results)})


class AnalysisOrchestrator:
    """Coordinates provider, prompts, decoding and scoring over a session store."""

    def __init__(
        self,
        llm: LLMClient,
        store: SessionStore,
        max_workers: int = 5,
        text_extractor: Callable[[bytes, str], str] = extract_text,
    ):
        self.llm = llm
        self.store = store
        self.max_workers = max(1, max_workers)
        self.text_extractor = text_extractor

    # ---------- LLM configuration ----------

    def configure_llm(self, api_key: str, provider: Optional[str] = None) -> None:
        self.llm.configure(provider or self.llm.settings.provider, api_key)

    # ---------- sessions ----------

    def create_session(self) -> str:
        return self.store.create()

    def delete_session(self, session_id: str) -> None:
        self.store.delete(session_id)

    def list_candidates(self, session_id: str) -> List[Candidate]:
        try:
            return self.store.list_candidates(session_id)
        except SessionNotFoundError:
            return []

    # ---------- parsing ----------

    def parse_candidate(self, raw_text: str, file_name: str) -> Candidate:
        """Structured extraction of one resume; never raises for model trouble."""
        if not self.llm.is_configured():
            return Candidate(file_name=file_name, raw_content=raw_text)

        try:
            response = self.llm.complete(build_parse_prompt(raw_text))
            parsed = decode_parsed_resume(response)
            return candidate_from_parsed(parsed, raw_text, file_name)
        except (ProviderError, MalformedModelResponseError) as e:
            logger.warning(f"Resume parsing failed for {file_name}, keeping raw text: {e.message}")
            return Candidate(full_name="", file_name=file_name, raw_content=raw_text, parsed=False)

    def _ingest_file(self, file_name: str, data: bytes) -> Tuple[Optional[Candidate], Optional[str]]:
        if not is_supported(file_name):
            return None, UnsupportedFormatError(file_name, SUPPORTED_EXTENSIONS).message
        try:
            content = self.text_extractor(data, file_name)
            if not content or not content.strip():
                raise EmptyExtractionError(file_name)
            return self.parse_candidate(content, file_name), None
        except ResumeRankerError as e:
            return None, e.message
        except Exception as e:
            logger.exception(f"Unexpected error while processing {file_name}")
            return None, f"Error processing file ({file_name}): {e}"

    def upload_candidates(self, session_id: str, files: Iterable[Tuple[str, bytes]]) -> UploadSummary:
        """Extract, parse and store each file; failures are reported per file."""
        files = list(files)
        summary = UploadSummary(session_id=session_id, total_files=len(files))

        with PerformanceMonitor(f"upload of {len(files)} file(s) to {session_id}", logger, threshold_ms=60000):
            for file_name, data in files:
                candidate, error = self._ingest_file(file_name, data)
                if candidate is None:
                    summary.errors.append(error)
                    summary.failed_to_upload += 1
                else:
                    summary.candidates.append(candidate)
                    summary.successfully_uploaded += 1

        self.store.append_candidates(session_id, summary.candidates)
        logger.info(
            f"Upload to {session_id}: {summary.successfully_uploaded} stored, {summary.failed_to_upload} failed"
        )
        return summary

    # ---------- scoring ----------

    def score_candidate(self, candidate: Candidate, requirement: JobRequirement) -> AnalysisResult:
        direct = uses_direct_scoring(candidate)
        response = self.llm.complete(select_scoring_prompt(candidate, requirement))
        analysis = decode_scoring_response(response)

        matched = analysis.matched_skills or []
        result = AnalysisResult(
            candidate_id=candidate.id,
            skills_score=analysis.skills_score,
            experience_score=analysis.experience_score,
            education_score=analysis.education_score,
            total_score=compute_total(
                analysis.skills_score,
                analysis.experience_score,
                analysis.education_score,
                requirement.weights,
            ),
            skills_analysis=SkillsAnalysis(
                matched_skills=matched,
                missing_skills=analysis.missing_skills or [],
                matched_count=len(matched),
                required_count=len(requirement.required_skills),
            ),
            experience_analysis=ExperienceAnalysis(
                total_years_of_experience=analysis.total_years_experience,
                required_years=requirement.min_years_of_experience,
                number_of_companies=analysis.number_of_companies,
                average_years_per_company=analysis.average_years_per_company,
                has_relevant_experience=analysis.has_relevant_experience,
            ),
            education_analysis=EducationAnalysis(
                has_required_degree=analysis.has_required_degree,
                is_relevant_field=analysis.is_relevant_field,
                actual_degree=analysis.actual_degree or "",
                actual_field=analysis.actual_field or "",
            ),
            ai_summary=analysis.summary or "",
            strengths=analysis.strengths or "",
            weaknesses=analysis.weaknesses or "",
        )
        if direct:
            result.candidate_name = as_text(analysis.candidate_name) or None
            result.candidate_email = as_text(analysis.candidate_email) or None
            result.candidate_phone = as_text(analysis.candidate_phone) or None
        return result

    def _analyze_one(self, candidate: Candidate, requirement: JobRequirement) -> CandidateOutcome:
        try:
            return CandidateOutcome(candidate=candidate, result=self.score_candidate(candidate, requirement))
        except ResumeRankerError as e:
            logger.warning(f"Analysis failed for {candidate.display_name}: {e.message}")
            return CandidateOutcome(
                candidate=candidate,
                error=f"Error analyzing candidate ({candidate.display_name}): {e.message}",
            )
        except Exception as e:
            logger.exception(f"Unexpected error analyzing {candidate.display_name}")
            return CandidateOutcome(
                candidate=candidate,
                error=f"Error analyzing candidate ({candidate.display_name}): {e}",
            )

    def _run_all(self, candidates: List[Candidate], requirement: JobRequirement) -> List[CandidateOutcome]:
        workers = min(self.max_workers, len(candidates))
        if workers <= 1:
            return [self._analyze_one(c, requirement) for c in candidates]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map yields in submission order whatever the completion order
            return list(executor.map(lambda c: self._analyze_one(c, requirement), candidates))

    def analyze_batch(self, session_id: str, requirement: JobRequirement) -> BatchResult:
        if not self.llm.is_configured():
            raise NotConfiguredError()
        candidates = self.store.list_candidates(session_id)
        if not candidates:
            raise NoCandidatesError(session_id)

        analyzed_at = datetime.utcnow()
        with PerformanceMonitor(f"analysis of {len(candidates)} candidate(s) in {session_id}", logger, threshold_ms=60000):
            outcomes = self._run_all(candidates, requirement)
        batch = accumulate_outcomes(session_id, outcomes, analyzed_at)

        try:
            self.store.replace_results(session_id, batch.results, analyzed_ids=[c.id for c in candidates])
        except SessionNotFoundError:
            logger.warning(f"Session {session_id} was deleted during analysis; results not stored")

        logger.info(
            f"Analysis of {session_id}: {batch.successfully_analyzed} succeeded, {batch.failed_to_analyze} failed"
        )
        return batch

    # ---------- results ----------

    def list_results(self, session_id: str) -> List[AnalysisResult]:
        try:
            return self.store.list_results(session_id)
        except SessionNotFoundError:
            return []

    def get_top_candidates(self, session_id: str, n: int = DEFAULT_TOP_N) -> List[AnalysisResult]:
        if n <= 0:
            return []
        return self.list_results(session_id)[:n]
