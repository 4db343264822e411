"""Study progress, daily streak, review session, and theme state"""

from datetime import date, datetime
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from mdstudy.crud.models import DocumentRoot, StudyProgress, StudySession, Theme
from mdstudy.crud.storage import StorageGateway


PROGRESS_KEY = "progress"
SESSION_KEY = "session"
THEME_KEY = "theme"

DEFAULT_THEME = Theme.dark
DARK_CLASS = "dark"


def _parse_day(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value) if value else None
    except ValueError:
        logger.warning(f"Ignoring malformed lastStudied value {value!r}")
        return None


class ProgressTracker:
    """Sole mutator of StudyProgress; all state goes through the injected StorageGateway."""

    def __init__(self, storage: StorageGateway, root: Optional[DocumentRoot] = None):
        self.storage = storage
        self.root = root if root is not None else DocumentRoot()

    # --- progress ---

    def get_progress(self) -> StudyProgress:
        """Return stored progress, or zeroed progress if none (or invalid) is stored."""
        data = self.storage.read(PROGRESS_KEY)
        if data is None:
            return StudyProgress()
        try:
            return StudyProgress.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Stored progress is invalid, using defaults: {e.error_count()} error(s)")
            return StudyProgress()

    def save_progress(self, progress: StudyProgress) -> bool:
        return self.storage.write(PROGRESS_KEY, progress.model_dump(by_alias=True))

    def update_streak(self, today: Optional[date] = None) -> StudyProgress:
        """Advance the streak by calendar day and persist it.

        Same day, or a lastStudied date in the future, is a no-op. Yesterday
        increments the streak; any longer gap (or no history) restarts it at 1.
        """
        today = today or date.today()
        progress = self.get_progress()
        last = _parse_day(progress.last_studied)

        if last is None:
            progress.streak = 1
        else:
            diff = (today - last).days
            if diff <= 0:
                return progress
            progress.streak = progress.streak + 1 if diff == 1 else 1

        progress.last_studied = today.isoformat()
        self.save_progress(progress)
        return progress

    def record_review(self, correct: bool, today: Optional[date] = None) -> StudyProgress:
        """Count one reviewed card: streak, totals, and the active session if any."""
        progress = self.update_streak(today)
        progress.total_cards += 1
        if correct:
            progress.mastered_cards += 1
        self.save_progress(progress)

        session = self.get_session()
        if session is not None:
            session.cards_studied += 1
            if correct:
                session.correct += 1
            else:
                session.incorrect += 1
            self.save_session(session)
        return progress

    # --- session ---

    def get_session(self) -> Optional[StudySession]:
        data = self.storage.read(SESSION_KEY)
        if data is None:
            return None
        try:
            return StudySession.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Stored session is invalid, ignoring: {e.error_count()} error(s)")
            return None

    def save_session(self, session: StudySession) -> bool:
        return self.storage.write(SESSION_KEY, session.model_dump(by_alias=True))

    def start_session(self, now: Optional[datetime] = None) -> StudySession:
        """Begin a fresh session, replacing any active one."""
        now = now or datetime.now()
        session = StudySession(start_time=int(now.timestamp() * 1000))
        self.save_session(session)
        return session

    def clear_session(self) -> None:
        self.storage.remove(SESSION_KEY)

    # --- theme ---

    def get_theme(self) -> Theme:
        value = self.storage.read(THEME_KEY)
        try:
            return Theme(value) if value is not None else DEFAULT_THEME
        except ValueError:
            logger.warning(f"Unknown stored theme {value!r}, using {DEFAULT_THEME.value}")
            return DEFAULT_THEME

    def save_theme(self, theme: Theme) -> bool:
        """Persist the theme and sync the dark class on the document root."""
        theme = Theme(theme)
        if theme is Theme.dark:
            self.root.classes.add(DARK_CLASS)
        else:
            self.root.classes.discard(DARK_CLASS)
        return self.storage.write(THEME_KEY, theme.value)

    def toggle_theme(self) -> Theme:
        theme = Theme.light if self.get_theme() is Theme.dark else Theme.dark
        self.save_theme(theme)
        return theme

    def reset(self) -> None:
        """Forget progress and any active session; the theme is kept."""
        self.storage.remove(PROGRESS_KEY)
        self.clear_session()
