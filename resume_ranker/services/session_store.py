"""
In-memory Session Store holding each session's candidates and latest results
"""
import threading
from datetime import datetime
from typing import Dict, Iterable, List

from resume_ranker.models.models import AnalysisResult, Candidate, Session
from resume_ranker.utils.exceptions import SessionNotFoundError
from resume_ranker.utils.logging_config import get_logger

logger = get_logger(__name__)


class SessionStore:
    """Concurrency-safe map of session id -> Session.

    ``_lock`` only guards the map itself; every session has its own lock so
    work on one session never waits on another.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[str, Session] = {}
        self._session_locks: Dict[str, threading.RLock] = {}

    def _register(self, session: Session) -> None:
        self._sessions[session.session_id] = session
        self._session_locks[session.session_id] = threading.RLock()

    def _lookup(self, session_id: str):
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            return session, self._session_locks[session_id]

    def create(self) -> str:
        session = Session()
        with self._lock:
            self._register(session)
        logger.info(f"Created session {session.session_id}")
        return session.session_id

    def exists(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def get(self, session_id: str) -> Session:
        """Snapshot of the session; later writes do not show through it."""
        session, lock = self._lookup(session_id)
        with lock:
            return session.model_copy(update={
                "candidates": list(session.candidates),
                "results": list(session.results),
            })

    def delete(self, session_id: str) -> None:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
            self._session_locks.pop(session_id, None)
        if removed is not None:
            logger.info(f"Deleted session {session_id}")

    def append_candidates(self, session_id: str, candidates: Iterable[Candidate]) -> None:
        """Append to the session, creating it under this id when absent."""
        with self._lock:
            if session_id not in self._sessions:
                self._register(Session(session_id=session_id, created_at=datetime.utcnow()))
                logger.info(f"Created session {session_id} on first upload")
            session = self._sessions[session_id]
            lock = self._session_locks[session_id]
        with lock:
            session.candidates.extend(candidates)

    def list_candidates(self, session_id: str) -> List[Candidate]:
        session, lock = self._lookup(session_id)
        with lock:
            return list(session.candidates)

    def list_results(self, session_id: str) -> List[AnalysisResult]:
        session, lock = self._lookup(session_id)
        with lock:
            return list(session.results)

    def replace_results(self, session_id: str, results: List[AnalysisResult], analyzed_ids: Iterable[str] = None) -> None:
        """Swap in a new result list and re-attach each candidate's latest result.

        Candidates in ``analyzed_ids`` without a new result lose their old one.
        """
        session, lock = self._lookup(session_id)
        by_candidate = {r.candidate_id: r for r in results}
        cleared = set(analyzed_ids) if analyzed_ids is not None else set(by_candidate)
        with lock:
            session.results = list(results)
            for candidate in session.candidates:
                if candidate.id in by_candidate:
                    candidate.analysis_result = by_candidate[candidate.id]
                elif candidate.id in cleared:
                    candidate.analysis_result = None
