from sqlalchemy.orm import Session


class BaseRepository:
    """Session holder shared by the staffing repositories.

    Repositories only flush; committing belongs to the unit of work.
    """

    def __init__(self, db: Session):
        self.db = db

    def _add(self, instance):
        """Add a new row and flush so its generated id is available."""
        self.db.add(instance)
        self.db.flush()
        return instance
