from sqlalchemy.orm import Session


class BaseRepository:
    """Shared session handling. Repositories never commit on their own; the caller's session scope does."""

    def __init__(self, db: Session):
        self.db = db

    def flush(self) -> None:
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
